"""Plain-text to styled document transcoding."""

from .builder import DOCX_MEDIA_TYPE, build_document, render_docx, transcode_to_docx
from .classifier import classify_line, classify_text, find_signature_indices
from .filenames import content_disposition, derive_export_basename, extract_title, sanitize_filename
from .styles import STYLE_TABLE, style_paragraph

__all__ = [
    "DOCX_MEDIA_TYPE",
    "STYLE_TABLE",
    "build_document",
    "classify_line",
    "classify_text",
    "content_disposition",
    "derive_export_basename",
    "extract_title",
    "find_signature_indices",
    "render_docx",
    "sanitize_filename",
    "style_paragraph",
    "transcode_to_docx",
]
