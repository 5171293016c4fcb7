# API endpoints and routers

from .widget_endpoints import router as widget_router
from .health_endpoints import router as health_router

__all__ = [
    "widget_router",
    "health_router",
]
