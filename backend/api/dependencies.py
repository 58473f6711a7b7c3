"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

The gestor invite service is not cached: it acts with the caller's
forwarded Authorization header, so it is built per request.
"""

from typing import Optional, TYPE_CHECKING

from fastapi import Header

from shared.config import get_settings
from shared.exceptions import MissingServerConfigurationError

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.invites.interfaces import IInviteService
    from modules.tenants.service import TenantResolver


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._tenant_resolver: "TenantResolver | None" = None
        self._invite_service: "IInviteService | None" = None

    @property
    def tenants(self) -> "TenantResolver":
        """Get the tenant resolver instance."""
        if self._tenant_resolver is None:
            from modules.tenants.host import HostRules
            from modules.tenants.repository import TenantRepository
            from modules.tenants.service import TenantResolver
            from shared.database import get_supabase_client

            settings = get_settings()
            self._tenant_resolver = TenantResolver(
                TenantRepository(get_supabase_client()),
                HostRules.from_settings(settings),
            )
        return self._tenant_resolver

    @property
    def invites(self) -> "IInviteService":
        """Get the generic invite service instance."""
        if self._invite_service is None:
            from shared.database import get_supabase_client

            self._invite_service = build_invite_service(get_supabase_client())
        return self._invite_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._tenant_resolver = None
        self._invite_service = None


def build_invite_service(db, caller_db=None) -> "IInviteService":
    """Assemble an InviteService around Supabase clients."""
    from modules.invites.identity import SupabaseIdentityProvider
    from modules.invites.repository import AccountRepository, InviteRepository
    from modules.invites.service import InviteService

    settings = get_settings()
    return InviteService(
        invites=InviteRepository(db, caller_db=caller_db),
        accounts=AccountRepository(db),
        identity=SupabaseIdentityProvider(db),
        student_email_domain=settings.student_email_domain,
        min_password_length=settings.min_password_length,
    )


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


def require_supabase_settings(require_anon_key: bool = False) -> None:
    """
    Fail fast when the server is not configured for Supabase.

    Raises:
        MissingServerConfigurationError: If any required setting is missing
    """
    missing = get_settings().missing_supabase_settings(require_anon_key=require_anon_key)
    if missing:
        raise MissingServerConfigurationError(missing)


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_tenant_resolver() -> "TenantResolver":
    """FastAPI dependency for tenant resolution."""
    return get_container().tenants


def get_invite_service() -> "IInviteService":
    """FastAPI dependency for generic invite redemption."""
    require_supabase_settings()
    return get_container().invites


def get_gestor_invite_service(
    authorization: Optional[str] = Header(default=None),
) -> "IInviteService":
    """FastAPI dependency for gestor invite redemption (per request)."""
    from shared.database import get_supabase_caller_client, get_supabase_client

    require_supabase_settings(require_anon_key=True)
    return build_invite_service(
        get_supabase_client(),
        caller_db=get_supabase_caller_client(authorization),
    )
