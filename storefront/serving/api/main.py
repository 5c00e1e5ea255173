"""
FastAPI Application Factory

Creates and configures the storefront API application.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
import structlog

from storefront.config import Settings, get_settings
from storefront.config.logging import configure_logging
from storefront.database.connection import Database
from storefront.serving.api.errors import register_exception_handlers
from storefront.serving.api.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from storefront.serving.api.routes import (
    basket_router,
    catalog_router,
    health_router,
)

logger = structlog.get_logger(__name__)


def create_api_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings, defaults to the cached environment settings
        database: Pre-built database handle. When omitted the lifespan builds
            one from settings and disposes it on shutdown.

    Returns:
        Configured FastAPI app instance
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings=settings)
        logger.info("Starting Storefront API", environment=settings.app_env)

        owned = database is None
        app.state.database = database or Database.from_settings(settings.database)
        if owned:
            await app.state.database.connect()

        yield

        logger.info("Shutting down...")
        if owned:
            await app.state.database.dispose()

    app = FastAPI(
        title="Storefront Basket API",
        description="Product catalog browsing and basket checkout",
        version=settings.version,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    if database is not None:
        app.state.database = database

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router, tags=["Health"])
    app.include_router(catalog_router, prefix="/categories", tags=["Catalog"])
    app.include_router(basket_router, tags=["Basket"])

    @app.get("/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "environment": settings.app_env,
        }

    return app
