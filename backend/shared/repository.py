"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

from typing import Any, Optional, TypeVar, Generic
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - Single-row helpers for unique-match queries

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class TenantRepository(BaseRepository[Tenant]):
            def get_active_by_subdomain(self, subdomain: str) -> Optional[Tenant]:
                query = self._db.table("tenants").select("*").eq("subdominio", subdomain)
                row = self._maybe_single(query)
                return Tenant.model_validate(row) if row else None
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    @staticmethod
    def _maybe_single(query: Any) -> Optional[dict[str, Any]]:
        """
        Execute a query expected to match at most one row.

        Depending on the postgrest version, maybe_single() yields either
        None or a response with empty data when nothing matches. More than
        one match raises from the client.

        Returns:
            The matching row, or None
        """
        result = query.maybe_single().execute()
        if result is None or not result.data:
            return None
        return result.data
