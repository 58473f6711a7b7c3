"""
Tenant module exceptions.
"""

from typing import Optional

from shared.exceptions import NotFoundError


TENANT_NOT_FOUND_MESSAGE = "Tenant não encontrado para este subdomínio."


class TenantNotFoundError(NotFoundError):
    """Raised when a tenant host has no matching active tenant."""

    def __init__(self, subdomain: Optional[str], reason: Optional[str] = None):
        super().__init__(
            TENANT_NOT_FOUND_MESSAGE,
            code="TENANT_NOT_FOUND",
            details={"subdomain": subdomain, "reason": reason},
        )
        self.subdomain = subdomain
