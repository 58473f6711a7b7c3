"""
Centralized configuration for the Bibliotecai backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., SUPABASE_*, APP_*).

Required for invite redemption:
- SUPABASE_URL
- SUPABASE_SERVICE_ROLE_KEY
- SUPABASE_ANON_KEY (gestor invites only)

Optional, used by tenant resolution:
- APP_BASE_DOMAIN
- VERCEL_PROJECT_HOST
"""

from functools import lru_cache
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Bibliotecai API"
    app_version: str = "0.1.0"

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""

    # Tenant resolution
    app_base_domain: str = ""
    vercel_project_host: str = ""
    preview_platform_suffix: str = "vercel.app"

    # Invite redemption
    student_email_domain: str = "temp.bibliotecai.com"
    min_password_length: int = 6

    @field_validator(
        "app_base_domain",
        "vercel_project_host",
        "preview_platform_suffix",
        "student_email_domain",
    )
    @classmethod
    def normalize_host(cls, value: str) -> str:
        """Hosts are compared lower-cased and without surrounding dots."""
        return value.strip().lower().strip(".")

    def missing_supabase_settings(self, require_anon_key: bool = False) -> list[str]:
        """
        List the required Supabase settings that are not configured.

        Args:
            require_anon_key: Whether the anon key is needed by the caller

        Returns:
            Environment variable names that are missing (empty if complete)
        """
        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if require_anon_key and not self.supabase_anon_key:
            missing.append("SUPABASE_ANON_KEY")
        if not self.supabase_service_role_key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return missing


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
