"""Download filename derivation for exported documents."""

import re
from urllib.parse import quote

TITLE_TAG_PATTERN = re.compile(r"^[【\[][ \t　]*标题[ \t　]*[】\]][ \t　]*([^\n\r]+)", re.MULTILINE)
ILLEGAL_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')
DOCX_SUFFIX = ".docx"


def extract_title(content: str) -> str | None:
    """Text of the first ``【标题】`` line, if any."""
    match = TITLE_TAG_PATTERN.search(content or "")
    if not match:
        return None
    return match.group(1).strip() or None


def sanitize_filename(name: str) -> str:
    return ILLEGAL_FILENAME_CHARS.sub("_", name).strip()


def derive_export_basename(content: str, filename: str | None = None, default: str = "公文") -> str:
    """Pick the base name (no extension) for an exported document.

    Preference order: explicit ``filename``, the title tag in ``content``,
    then ``default``. Filesystem-illegal characters become underscores.
    """
    base = (filename or "").strip()
    if base.lower().endswith(DOCX_SUFFIX):
        base = base[: -len(DOCX_SUFFIX)].strip()
    if not base:
        base = extract_title(content) or ""
    base = sanitize_filename(base)
    return base or default


def content_disposition(basename: str) -> str:
    """Attachment header safe for non-ASCII names (RFC 6266 / RFC 5987)."""
    encoded = quote(f"{basename}{DOCX_SUFFIX}", safe="")
    return f"attachment; filename=\"{encoded}\"; filename*=UTF-8''{encoded}"
