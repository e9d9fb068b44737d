"""API routes package."""

from mead.api.routes.explorer import router as explorer_router
from mead.api.routes.health import router as health_router
from mead.api.routes.records import router as records_router

__all__ = [
    "explorer_router",
    "health_router",
    "records_router",
]
