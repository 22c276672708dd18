"""Data models for the gongwen writer."""

from .common import (
    AUTO,
    GenerationMode,
    PromptEnvelope,
    StreamEvent,
    StreamEventType,
)
from .document import (
    Alignment,
    ExportedDocument,
    PageGeometry,
    ParagraphKind,
    ParsedLine,
    StyledParagraph,
)
from .generation import (
    DocSchemasResponse,
    GenerationRequest,
    GenerationResponse,
)

__all__ = [
    # Common
    "AUTO",
    "GenerationMode",
    "PromptEnvelope",
    "StreamEvent",
    "StreamEventType",
    # Document
    "Alignment",
    "ExportedDocument",
    "PageGeometry",
    "ParagraphKind",
    "ParsedLine",
    "StyledParagraph",
    # Generation
    "DocSchemasResponse",
    "GenerationRequest",
    "GenerationResponse",
]
