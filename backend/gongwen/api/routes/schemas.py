"""Document-type schema endpoint."""

from fastapi import APIRouter

from ...models import DocSchemasResponse
from ...services import get_schema_registry

router = APIRouter(tags=["Schemas"])


@router.get("/doc-schemas", response_model=DocSchemasResponse)
async def doc_schemas() -> DocSchemasResponse:
    """List known document types and their field schemas."""
    registry = get_schema_registry()
    return DocSchemasResponse(doc_types=registry.doc_types(), schemas=registry.schemas())
