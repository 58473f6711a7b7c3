"""
Tenant resolution service.

TenantResolver turns a host name into a TenantContext. TenantContextProvider
holds the context for one session (page load, request, or connection) and
guards against stale results: a resolution that finishes after the
provider was unmounted or re-mounted is discarded.
"""

import logging
from typing import Optional

from .exceptions import TenantNotFoundError
from .host import HostRules, QueryParams, classify_host
from .interfaces import ITenantRepository, ITenantResolver
from .models import HostClassification, HostMode, Tenant, TenantContext

logger = logging.getLogger(__name__)


class TenantResolver(ITenantResolver):
    """
    Resolves the tenant owning a request.

    Performs no lookup for root/admin hosts and exactly one lookup for
    tenant hosts.
    """

    def __init__(self, repository: ITenantRepository, rules: Optional[HostRules] = None):
        self._repository = repository
        self._rules = rules or HostRules()

    def classify(self, hostname: Optional[str], query: QueryParams = None) -> HostClassification:
        """Classify a host using this resolver's deployment rules."""
        classification = classify_host(hostname, query, self._rules)
        logger.debug(
            f"Host '{hostname}' classified as {classification.mode.value}"
            f" (subdomain={classification.subdomain})"
        )
        return classification

    async def lookup(self, classification: HostClassification) -> Tenant:
        """
        Fetch the active tenant for a tenant-mode classification.

        Raises:
            TenantNotFoundError: If no active tenant matches or the lookup fails
        """
        subdomain = classification.subdomain
        if classification.mode != HostMode.TENANT or not subdomain:
            raise TenantNotFoundError(subdomain, reason="not a tenant host")

        try:
            tenant = self._repository.get_active_by_subdomain(subdomain)
        except Exception as e:
            logger.warning(f"Tenant lookup failed for '{subdomain}': {e}")
            raise TenantNotFoundError(subdomain, reason=str(e)) from e

        if tenant is None:
            raise TenantNotFoundError(subdomain, reason="no active tenant")
        return tenant

    async def resolve(self, hostname: Optional[str], query: QueryParams = None) -> TenantContext:
        return await self.resolve_classification(self.classify(hostname, query))

    async def resolve_classification(self, classification: HostClassification) -> TenantContext:
        """Terminal context for an already classified host."""
        if classification.mode != HostMode.TENANT:
            return TenantContext(mode=classification.mode, loading=False)

        try:
            tenant = await self.lookup(classification)
        except TenantNotFoundError as e:
            return TenantContext(mode=classification.mode, loading=False, error=e.message)

        return TenantContext(tenant=tenant, mode=classification.mode, loading=False)


class TenantContextProvider:
    """
    Session-scoped holder of the tenant context.

    Lifecycle: created on first use, mount() resolves once, unmount() or
    reset() ends the session. Each mount() gets a generation number; only
    the newest generation of a still-mounted provider may publish its
    result.
    """

    def __init__(self, resolver: TenantResolver):
        self._resolver = resolver
        self._context = TenantContext()
        self._mounted = False
        self._generation = 0

    @property
    def context(self) -> TenantContext:
        """Current tenant context."""
        return self._context

    @property
    def mounted(self) -> bool:
        return self._mounted

    async def mount(self, hostname: Optional[str], query: QueryParams = None) -> TenantContext:
        """
        Start a resolution for this session.

        Returns:
            The context after this resolution, or the unchanged current
            context if the result was discarded
        """
        self._mounted = True
        self._generation += 1
        generation = self._generation

        classification = self._resolver.classify(hostname, query)
        self._context = TenantContext(loading=True, mode=classification.mode)

        result = await self._resolver.resolve_classification(classification)
        self._publish(generation, result)
        return self._context

    def unmount(self) -> None:
        """Stop accepting results from in-flight resolutions."""
        self._mounted = False

    def reset(self) -> None:
        """End the session and return to the initial state."""
        self.unmount()
        self._generation += 1
        self._context = TenantContext()

    def _publish(self, generation: int, context: TenantContext) -> None:
        if not self._mounted or generation != self._generation:
            logger.debug("Discarding stale tenant resolution result")
            return
        self._context = context
