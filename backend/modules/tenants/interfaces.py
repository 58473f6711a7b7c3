"""
Tenant module interfaces.

Other modules should depend on these protocols, not the concrete
implementations, so tests can substitute in-memory versions.
"""

from typing import Optional, Protocol, runtime_checkable

from .host import QueryParams
from .models import Tenant, TenantContext


@runtime_checkable
class ITenantRepository(Protocol):
    """Read access to tenants."""

    def get_active_by_subdomain(self, subdomain: str) -> Optional[Tenant]:
        """
        Get the active tenant for a subdomain.

        Returns:
            Tenant if found, None otherwise
        """
        ...


@runtime_checkable
class ITenantResolver(Protocol):
    """
    Interface for tenant resolution.

    Resolution runs once per page load / request and never caches tenants.
    """

    async def resolve(self, hostname: Optional[str], query: QueryParams = None) -> TenantContext:
        """
        Classify the host and, for tenant hosts, look up the tenant.

        Args:
            hostname: Request host name (port allowed)
            query: Query string or parameter mapping

        Returns:
            Terminal TenantContext (loading=False). A tenant host without a
            matching active tenant yields tenant=None with error set.
        """
        ...
