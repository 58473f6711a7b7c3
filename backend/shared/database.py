"""
Database client factory for Supabase.

Provides both service-role clients (for identity and table mutations that
bypass RLS) and caller clients (anon key plus the caller's forwarded
Authorization header, for privileged lookups that must run as the caller).
"""

import logging
from typing import Optional
from supabase import create_client, Client, ClientOptions

from .config import get_settings
from .exceptions import InvalidServerConfigurationError, MissingServerConfigurationError

logger = logging.getLogger(__name__)

# Module-level client cache
_service_client: Optional[Client] = None


def _server_options() -> ClientOptions:
    """Backend clients never persist or refresh auth sessions."""
    return ClientOptions(auto_refresh_token=False, persist_session=False)


def _create_client(url: str, key: str) -> Client:
    try:
        return create_client(url, key, options=_server_options())
    except Exception as e:
        logger.error(f"Supabase client rejected the configured settings: {e}")
        raise InvalidServerConfigurationError(str(e)) from e


def get_supabase_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Use this for backend operations that need full database access,
    such as creating identities and provisioning roles and profiles.

    Returns:
        Supabase client configured with service role key

    Raises:
        MissingServerConfigurationError: If URL or service role key is unset
        InvalidServerConfigurationError: If the client rejects URL or key
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        missing = settings.missing_supabase_settings()
        if missing:
            raise MissingServerConfigurationError(missing)
        _service_client = _create_client(
            settings.supabase_url, settings.supabase_service_role_key
        )

    return _service_client


def get_supabase_caller_client(authorization: Optional[str] = None) -> Client:
    """
    Get Supabase client that acts with the caller's credentials.

    Use this for operations that should respect Row Level Security (RLS),
    such as the tenant invite lookup RPC.

    Args:
        authorization: Raw Authorization header from the incoming request
            ("Bearer <jwt>"). When absent the client acts as anon.

    Returns:
        Supabase client configured with the anon key

    Raises:
        MissingServerConfigurationError: If URL or anon key is unset
        InvalidServerConfigurationError: If the client rejects URL or key
    """
    settings = get_settings()
    missing = settings.missing_supabase_settings(require_anon_key=True)
    if missing:
        raise MissingServerConfigurationError(missing)

    client = _create_client(settings.supabase_url, settings.supabase_anon_key)

    token = _bearer_token(authorization)
    if token:
        client.postgrest.auth(token)
    return client


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    global _service_client
    _service_client = None
