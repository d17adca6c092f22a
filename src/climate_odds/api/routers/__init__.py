"""API Routers Module"""

from .health import router as health_router
from .climate import router as climate_router

__all__ = [
    "health_router",
    "climate_router",
]
