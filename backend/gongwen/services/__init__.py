"""Services for the gongwen writer."""

from .generation import GenerationService, get_generation_service
from .schemas import DocSchemaRegistry, get_schema_registry
from .upstream import UpstreamClient, UpstreamStream, close_upstream_client, get_upstream_client

__all__ = [
    "DocSchemaRegistry",
    "get_schema_registry",
    "GenerationService",
    "get_generation_service",
    "UpstreamClient",
    "UpstreamStream",
    "close_upstream_client",
    "get_upstream_client",
]
