"""Audit-friendly logging configuration.

Key principle: Never log generated text, user input or credentials.
Log operational metadata only (lengths, counts, ids, status codes).

All module loggers live under the ``gongwen`` namespace and share one
handler installed on that parent logger.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from ..config import get_settings

ROOT_LOGGER = "gongwen"

# User text: only the length survives
REDACTED_FIELDS = frozenset({
    "input",
    "content",
    "prompt",
    "delta",
    "text",
    "raw",
    "body",
    "system_prompt",
    "filename",
})
# Credentials: only presence survives
MASKED_FIELDS = frozenset({"api_key", "authorization"})


def sanitize(data: Any) -> Any:
    """Return a copy of ``data`` with user text redacted and secrets masked."""
    if isinstance(data, dict):
        cleaned = {}
        for key, value in data.items():
            name = str(key).lower()
            if name in MASKED_FIELDS:
                cleaned[key] = "[MASKED]" if value else None
            elif name in REDACTED_FIELDS:
                cleaned[key] = f"[REDACTED - {len(str(value))} chars]"
            else:
                cleaned[key] = sanitize(value)
        return cleaned
    if isinstance(data, (list, tuple)):
        return [sanitize(item) for item in data]
    return data


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class JsonFormatter(logging.Formatter):
    """One JSON object per record; non-ASCII kept readable."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in ("data", "audit"):
            value = getattr(record, key, None)
            if value:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines with metadata appended as ``key=value`` pairs."""

    def __init__(self):
        super().__init__("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = getattr(record, "audit", None) or getattr(record, "data", None)
        if fields:
            line += " | " + " ".join(f"{key}={value}" for key, value in fields.items())
        return line


def _install_handler() -> logging.Logger:
    """Attach the configured handler to the package logger once."""
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root

    settings = get_settings()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if settings.log_format == "json" else TextFormatter())
    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())
    return root


class AuditLogger:
    """Logger that ensures user text and secrets are never logged.

    Every keyword argument passes through :func:`sanitize` before it
    reaches a handler.
    """

    def __init__(self, name: str):
        _install_handler()
        if not name.startswith(ROOT_LOGGER):
            name = f"{ROOT_LOGGER}.{name}"
        self.logger = logging.getLogger(name)

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        self.logger.log(level, message, exc_info=exc_info, extra={"data": sanitize(kwargs)})

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        """Log an error; pass ``exc_info=True`` inside an except block for the traceback."""
        self._log(logging.ERROR, message, exc_info=exc_info, **kwargs)

    def audit(
        self,
        action: str,
        resource_type: str,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Log a request-level action (generation or export) without user text."""
        audit_data = {
            "action": action,
            "resource_type": resource_type,
            "resource_id": resource_id,
            "timestamp": _utc_now(),
            **sanitize(kwargs),
        }
        self.logger.info(f"AUDIT: {action} on {resource_type}", extra={"audit": audit_data})


def get_logger(name: str) -> AuditLogger:
    """Get an audit-safe logger instance."""
    return AuditLogger(name)
