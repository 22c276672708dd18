"""Generation-related request and response models.

These models define the API contracts for generation endpoints. Field names
on the wire are camelCase (``docType``) to match the front-end.
"""

from pydantic import BaseModel, Field, field_validator

from ..config import get_settings
from .common import AUTO


class GenerationRequest(BaseModel):
    """Request to generate (or polish) a document."""
    input: str = Field(..., min_length=1, description="Raw user text")
    mode: str = Field(default=AUTO, description="Generation mode; 'auto' adds no hint")
    doc_type: str = Field(
        default=AUTO,
        alias="docType",
        description="Document type hint; 'auto' lets the model decide",
    )

    model_config = {"populate_by_name": True}

    @field_validator("input")
    @classmethod
    def _check_input_length(cls, value: str) -> str:
        limit = get_settings().max_input_chars
        if len(value) > limit:
            raise ValueError(f"input exceeds {limit} characters")
        return value

    @field_validator("mode", "doc_type", mode="before")
    @classmethod
    def _default_to_auto(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return AUTO
        return value


class GenerationResponse(BaseModel):
    """Non-streaming generation result (final answer only)."""
    content: str


class DocSchemasResponse(BaseModel):
    """Known document types and their field schemas."""
    doc_types: list[str] = Field(serialization_alias="docTypes")
    schemas: dict[str, object]
