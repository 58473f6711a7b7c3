"""
Host name classification.

Decides whether a request targets the platform root, the platform admin
area, or a tenant, using only the host name and the query string. Rules are
evaluated in order and the first match wins:

1. `admin.*` hosts are admin.
2. Local development hosts read `?tenant=<sub>` or `?admin=1`.
3. Hosts under the configured base domain use their prefix.
4. Hosts under the preview platform (e.g. `*.vercel.app`) use their first
   label when they have at least four labels.
5. Anything else is root.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import parse_qsl

from .models import HostClassification

logger = logging.getLogger(__name__)

LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1"})
RESERVED_SUBDOMAINS = frozenset({"www", "app", "api", "assets", "cdn"})

QueryParams = Union[str, Mapping[str, str], None]


@dataclass(frozen=True)
class HostRules:
    """
    Deployment-specific inputs to host classification.

    Attributes:
        base_domain: Production base domain (tenants live at `<sub>.<base>`)
        project_host: The preview platform host of the project itself
        preview_suffix: Multi-tenant preview platform suffix
    """

    base_domain: str = ""
    project_host: str = ""
    preview_suffix: str = "vercel.app"

    @classmethod
    def from_settings(cls, settings) -> "HostRules":
        return cls(
            base_domain=settings.app_base_domain,
            project_host=settings.vercel_project_host,
            preview_suffix=settings.preview_platform_suffix,
        )


def strip_port(hostname: Optional[str]) -> str:
    """Lower-case a host name and drop any `:port` suffix."""
    return (hostname or "").lower().split(":")[0]


def _query_dict(query: QueryParams) -> Mapping[str, str]:
    if query is None:
        return {}
    if isinstance(query, str):
        return dict(parse_qsl(query.lstrip("?")))
    return query


def classify_host(
    hostname: Optional[str],
    query: QueryParams = None,
    rules: Optional[HostRules] = None,
) -> HostClassification:
    """
    Classify a request host.

    Args:
        hostname: Host name, optionally with a port
        query: Raw query string (`?tenant=x`) or a mapping of parameters
        rules: Deployment rules; defaults to no base domain

    Returns:
        HostClassification with mode and, for tenant mode, the subdomain
    """
    rules = rules or HostRules()
    host = strip_port(hostname)

    if not host:
        return HostClassification.root()

    if host.startswith("admin."):
        return HostClassification.admin()

    if host in LOCAL_HOSTS:
        return _classify_local(_query_dict(query))

    if rules.base_domain and host.endswith(f".{rules.base_domain}"):
        return _classify_base_domain(host, rules.base_domain)

    if rules.preview_suffix and host.endswith(f".{rules.preview_suffix}"):
        classification = _classify_preview(host, rules.project_host)
        if classification is not None:
            return classification

    return HostClassification.root()


def _classify_local(params: Mapping[str, str]) -> HostClassification:
    local_tenant = params.get("tenant")
    if local_tenant:
        return HostClassification.tenant(local_tenant.lower())

    if params.get("admin") == "1":
        return HostClassification.admin()

    return HostClassification.root()


def _classify_base_domain(host: str, base_domain: str) -> HostClassification:
    subdomain = host[: len(host) - len(base_domain) - 1]

    if not subdomain:
        return HostClassification.root()
    if subdomain == "admin":
        return HostClassification.admin()

    return HostClassification.tenant(subdomain)


def _classify_preview(host: str, project_host: str) -> Optional[HostClassification]:
    """
    Preview platform hosts.

    `project.vercel.app` is the root deployment and
    `branch--project.vercel.app` a preview build; neither is a tenant.
    Returns None when the rules fall through to the default.
    """
    if "--" in host:
        return HostClassification.root()

    if project_host and host == project_host:
        return HostClassification.root()

    labels = host.split(".")
    if len(labels) == 3:
        return HostClassification.root()

    if len(labels) >= 4:
        first = labels[0]
        if first == "admin":
            return HostClassification.admin()
        if first not in RESERVED_SUBDOMAINS:
            return HostClassification.tenant(first)
        logger.debug(f"Reserved preview subdomain '{first}' treated as root")

    return None
