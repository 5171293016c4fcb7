"""
FastAPI application setup.
"""

from fastapi import FastAPI
import logging
from contextlib import asynccontextmanager

from nearbymap.config.loader import load_config_for_environment
from nearbymap.config.settings import use_settings
from nearbymap.core.error_handlers import setup_error_handlers
from nearbymap.core.logging import configure_logging
from nearbymap.middleware import RequestContextMiddleware
from nearbymap.api import widget_router, health_router

# ENVIRONMENT picks the .env.<environment> file, the same way run.py does
settings = use_settings(load_config_for_environment())

configure_logging(settings.log_level.value, settings.log_file, settings.log_format)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown; the storage folder is created up front."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    settings.get_storage_path().mkdir(parents=True, exist_ok=True)

    if not settings.google_maps.api_key:
        logger.warning(
            "Google Maps API key not configured. "
            "Set GOOGLE_MAPS_API_KEY or pass apiKey in the widget parameter."
        )

    yield

    logger.info("Shutting down application")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )

    app.add_middleware(RequestContextMiddleware)
    setup_error_handlers(app)

    app.include_router(health_router)
    app.include_router(widget_router)

    @app.get("/")
    async def root():
        return {
            "message": settings.app_name,
            "version": settings.app_version,
            "status": "running",
        }

    return app


app = create_app()
