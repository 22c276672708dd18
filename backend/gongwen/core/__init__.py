"""Core utilities for the gongwen writer."""

from .exceptions import (
    ConfigurationError,
    ExportError,
    GenerationError,
    GongwenError,
    TemplateError,
    UpstreamError,
)
from .logging import AuditLogger, get_logger, sanitize

__all__ = [
    # Exceptions
    "ConfigurationError",
    "ExportError",
    "GenerationError",
    "GongwenError",
    "TemplateError",
    "UpstreamError",
    # Logging
    "AuditLogger",
    "get_logger",
    "sanitize",
]
