"""
Tenant resolution module.

Determines which tenant (school) a request belongs to from its host name.

Public API:
- classify_host / HostRules: Pure host classification
- ITenantResolver: Interface for tenant resolution
- TenantContext, Tenant, HostMode, HostClassification: Models
- TenantNotFoundError: Raised when a tenant host has no active tenant
"""

from .host import HostRules, classify_host, LOCAL_HOSTS, RESERVED_SUBDOMAINS
from .interfaces import ITenantRepository, ITenantResolver
from .models import HostClassification, HostMode, Tenant, TenantContext
from .exceptions import TenantNotFoundError, TENANT_NOT_FOUND_MESSAGE

__all__ = [
    # Host classification
    "HostRules",
    "classify_host",
    "LOCAL_HOSTS",
    "RESERVED_SUBDOMAINS",
    # Interfaces
    "ITenantRepository",
    "ITenantResolver",
    # Models
    "HostClassification",
    "HostMode",
    "Tenant",
    "TenantContext",
    # Exceptions
    "TenantNotFoundError",
    "TENANT_NOT_FOUND_MESSAGE",
]
