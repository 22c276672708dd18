"""API module for the gongwen writer."""

from .routes import export_router, generation_router, health_router, schemas_router

__all__ = [
    "export_router",
    "generation_router",
    "health_router",
    "schemas_router",
]
