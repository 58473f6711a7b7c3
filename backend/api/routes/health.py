"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from shared.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str
    missing_settings: list[str]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """
    Readiness check endpoint.

    Reports whether the Supabase settings required by invite redemption
    are present. Does not contact Supabase.
    """
    missing = get_settings().missing_supabase_settings(require_anon_key=True)
    return ReadinessResponse(
        status="ready" if not missing else "degraded",
        database="configured" if not missing else "unconfigured",
        missing_settings=missing,
    )
