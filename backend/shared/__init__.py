"""
Shared infrastructure for Bibliotecai backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factories
- exceptions: Base exception classes
- repository: Base repository class
- saga: Ordered steps with compensating actions

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, get_supabase_caller_client, reset_client_cache
from .exceptions import (
    BibliotecaiError,
    NotFoundError,
    ValidationError,
    ConfigurationError,
    InvalidServerConfigurationError,
    MissingServerConfigurationError,
    UnexpectedError,
)
from .repository import BaseRepository
from .saga import Saga

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "get_supabase_caller_client",
    "reset_client_cache",
    "BibliotecaiError",
    "NotFoundError",
    "ValidationError",
    "ConfigurationError",
    "InvalidServerConfigurationError",
    "MissingServerConfigurationError",
    "UnexpectedError",
    "BaseRepository",
    "Saga",
]
