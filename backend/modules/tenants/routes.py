"""
Tenant API endpoints.

Exposes the tenant context for the host a request was made to.
"""

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_tenant_resolver

from .service import TenantContextProvider, TenantResolver
from .models import TenantContext

router = APIRouter()


def request_host(request: Request) -> str:
    """Host the client addressed, honouring reverse proxies."""
    forwarded = request.headers.get("x-forwarded-host")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("host") or (request.url.hostname or "")


@router.get("/context", response_model=TenantContext, response_model_by_alias=False)
async def get_tenant_context(
    request: Request,
    resolver: TenantResolver = Depends(get_tenant_resolver),
) -> TenantContext:
    """
    Resolve the tenant context for the current host.

    Query parameters `tenant` and `admin=1` select a tenant or the admin
    area on local development hosts. A tenant host with no active tenant
    returns `tenant: null` and an `error` message.
    """
    provider = TenantContextProvider(resolver)
    try:
        return await provider.mount(request_host(request), request.query_params)
    finally:
        provider.unmount()
