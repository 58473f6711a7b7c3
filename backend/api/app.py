"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import get_settings as get_shared_settings
from shared.exceptions import BibliotecaiError, UnexpectedError

from .config import get_settings
from .routes import health
from modules.invites.routes import router as invites_router, tenant_router as tenant_invites_router
from modules.tenants.routes import router as tenants_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Validates configuration once at startup. Missing Supabase settings do
    not stop the server; affected endpoints answer 500 until they are set.
    """
    # Startup
    settings = get_settings()
    missing = get_shared_settings().missing_supabase_settings(require_anon_key=True)
    if missing:
        logger.warning(f"Supabase configuration incomplete, missing: {', '.join(missing)}")
    logger.info(f"Starting Bibliotecai API on {settings.host}:{settings.port}")
    yield
    # Shutdown
    logger.info("Shutting down Bibliotecai API")


async def bibliotecai_error_handler(request: Request, exc: BibliotecaiError) -> JSONResponse:
    """Render domain errors as the `{success: false, error}` envelope."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are reported like missing fields."""
    return JSONResponse(status_code=400, content={"success": False, "error": "Dados incompletos"})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Failures outside the routes, such as in dependencies, still get the envelope."""
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(status_code=500, content=UnexpectedError(str(exc)).to_envelope())


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    shared_settings = get_shared_settings()

    app = FastAPI(
        title=shared_settings.app_name,
        description="Tenant resolution and invite-based account provisioning for school libraries",
        version=shared_settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(BibliotecaiError, bibliotecai_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(tenants_router, prefix="/api/tenant", tags=["tenants"])
    app.include_router(invites_router, prefix="/api/invites", tags=["invites"])
    app.include_router(tenant_invites_router, prefix="/api/tenant-invites", tags=["invites"])

    return app


# Application instance for uvicorn
app = create_app()
