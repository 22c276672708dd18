"""API route modules."""

from .export import router as export_router
from .generation import router as generation_router
from .health import router as health_router
from .schemas import router as schemas_router

__all__ = [
    "export_router",
    "generation_router",
    "health_router",
    "schemas_router",
]
