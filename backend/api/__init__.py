"""
Bibliotecai API package.

Provides the FastAPI application for tenant resolution and invite redemption.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
