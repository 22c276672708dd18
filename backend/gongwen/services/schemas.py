"""Document-type schemas used to populate front-end selection controls."""

import json
from pathlib import Path
from typing import Any

from ..config import get_settings
from ..core import ConfigurationError, get_logger

logger = get_logger(__name__)


class DocSchemaRegistry:
    """Read-only view of the document-type schema file.

    The file is a JSON object keyed by document type; key order is kept.
    """

    def __init__(self, schemas: dict[str, Any]):
        self._schemas = schemas

    @classmethod
    def load(cls, path: Path) -> "DocSchemaRegistry":
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                f"Cannot load document schemas: {e.__class__.__name__}",
                {"path": str(path)},
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Document schemas must be a JSON object keyed by document type",
                {"path": str(path)},
            )

        logger.info("Loaded document schemas", path=str(path), doc_types=len(data))
        return cls(data)

    def doc_types(self) -> list[str]:
        return list(self._schemas)

    def schemas(self) -> dict[str, Any]:
        return dict(self._schemas)


# Singleton instance
_schema_registry: DocSchemaRegistry | None = None


def get_schema_registry() -> DocSchemaRegistry:
    """Get the singleton schema registry, loading it on first use."""
    global _schema_registry
    if _schema_registry is None:
        _schema_registry = DocSchemaRegistry.load(get_settings().doc_schemas_path)
    return _schema_registry
