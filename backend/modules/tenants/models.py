"""
Tenant module data models.

Tenants are stored in the `tenants` table with Portuguese column names;
the models expose English field names and accept the stored names as
aliases.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field


class HostMode(str, Enum):
    """How a request host is served."""

    ROOT = "root"
    ADMIN = "admin"
    TENANT = "tenant"


class HostClassification(BaseModel):
    """Result of classifying a host name and query string."""

    model_config = ConfigDict(frozen=True)

    mode: HostMode
    subdomain: Optional[str] = None

    @classmethod
    def root(cls) -> "HostClassification":
        return cls(mode=HostMode.ROOT)

    @classmethod
    def admin(cls) -> "HostClassification":
        return cls(mode=HostMode.ADMIN)

    @classmethod
    def tenant(cls, subdomain: str) -> "HostClassification":
        return cls(mode=HostMode.TENANT, subdomain=subdomain)


class Tenant(BaseModel):
    """
    A school's isolated namespace, addressed by subdomain.

    Read-only from this service; created and mutated by platform
    administration.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    id: str = Field(..., description="Tenant ID (UUID)")
    name: str = Field(..., alias="nome", description="Display name")
    school_id: Optional[str] = Field(None, alias="escola_id", description="Owning school")
    subdomain: str = Field(..., alias="subdominio", description="Host label")
    schema_name: Optional[str] = Field(None, description="Database schema")
    plan: Optional[str] = Field(None, alias="plano", description="Subscription plan")
    active: bool = Field(True, alias="ativo", description="Whether the tenant is live")


class TenantContext(BaseModel):
    """
    Tenant state exposed to the rest of the application.

    Exactly one terminal state is reached per resolution: either `tenant`
    is populated, or `tenant` is None (with `error` set when a tenant host
    did not match an active tenant).
    """

    tenant: Optional[Tenant] = None
    loading: bool = True
    error: Optional[str] = None
    mode: HostMode = HostMode.ROOT

    @computed_field
    @property
    def is_tenant_host(self) -> bool:
        return self.mode == HostMode.TENANT

    @computed_field
    @property
    def is_admin_host(self) -> bool:
        return self.mode == HostMode.ADMIN
