"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest

from api.dependencies import reset_container
from shared.config import Settings, get_settings
from shared.database import reset_client_cache


TEST_SUPABASE_URL = "https://test.supabase.co"
TEST_ANON_KEY = "test-anon-key"
TEST_SERVICE_ROLE_KEY = "test-service-role-key"


def make_settings(**overrides) -> Settings:
    """
    Build Settings with complete Supabase configuration.

    Values not overridden do not depend on the environment or .env file.
    """
    values = {
        "supabase_url": TEST_SUPABASE_URL,
        "supabase_anon_key": TEST_ANON_KEY,
        "supabase_service_role_key": TEST_SERVICE_ROLE_KEY,
        "app_base_domain": "",
        "vercel_project_host": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings, clients and services around each test."""
    get_settings.cache_clear()
    reset_client_cache()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_client_cache()
    reset_container()


@pytest.fixture
def settings() -> Settings:
    """Fully configured settings."""
    return make_settings()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Authorization header forwarded by the frontend."""
    return {"Authorization": "Bearer caller-jwt"}
