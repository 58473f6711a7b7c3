"""
Tenant repository for database access.

Reads the `tenants` table. Tenants are never written from this service.
"""

from typing import Optional

from shared.repository import BaseRepository
from .models import Tenant

TENANT_COLUMNS = "id, nome, escola_id, subdominio, schema_name, plano, ativo"


class TenantRepository(BaseRepository[Tenant]):
    """Repository for tenant lookups."""

    def get_active_by_subdomain(self, subdomain: str) -> Optional[Tenant]:
        """
        Get the active tenant registered for a subdomain.

        Uses a unique-match query; more than one active tenant for the same
        subdomain is a data error and raises from the client.

        Args:
            subdomain: Host label, lower-cased

        Returns:
            Tenant if an active one matches, None otherwise
        """
        query = (
            self._db.table("tenants")
            .select(TENANT_COLUMNS)
            .eq("subdominio", subdomain)
            .eq("ativo", True)
        )
        row = self._maybe_single(query)
        if row is None:
            return None
        return Tenant.model_validate(row)
