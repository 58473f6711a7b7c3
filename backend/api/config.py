"""
API configuration using Pydantic Settings.

Loads server configuration from environment variables with sensible defaults.
Supabase and tenancy settings live in shared.config.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """API configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BIBLIOTECAI_",
        case_sensitive=False,
        extra="ignore",
    )

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    reload: bool = False
    log_level: str = "INFO"

    # CORS settings (tenant subdomains are not known in advance)
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = False
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["authorization", "x-client-info", "apikey", "content-type"]


@lru_cache
def get_settings() -> APISettings:
    """Get cached settings instance."""
    return APISettings()
