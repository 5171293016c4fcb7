"""
Health check endpoint.

GET /health reports the application version, uptime, which upstream
services are configured and the request latency snapshot.
"""

from fastapi import APIRouter
from typing import Dict, Any
import logging
import time

from nearbymap.config.settings import get_settings
from nearbymap.core.error_handlers import error_handler
from nearbymap.core.metrics import get_metrics_snapshot

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

# Application start time for uptime calculation
_app_start_time = time.time()


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment.value,
        "uptime_seconds": round(time.time() - _app_start_time, 3),
        "services": {
            "google_maps": bool(settings.google_maps.api_key),
            "flickr": bool(settings.flickr.api_key and settings.flickr.photoset_id),
            "location_override": settings.location.latitude is not None
            and settings.location.longitude is not None,
        },
        "latency": get_metrics_snapshot(),
        "errors": error_handler.get_error_statistics(),
    }
