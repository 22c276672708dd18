"""Custom exceptions for the gongwen writer.

These exceptions provide clear error categories for proper handling at the API layer.
"""


class GongwenError(Exception):
    """Base exception for all gongwen writer errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(GongwenError):
    """Configuration or setup errors."""
    pass


class TemplateError(ConfigurationError):
    """The system prompt template cannot be used."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(
            message,
            {"path": path} if path else {},
        )


class GenerationError(GongwenError):
    """Errors related to content generation."""
    pass


class UpstreamError(GenerationError):
    """The chat-completion API refused the request or could not be reached.

    ``status_code`` is None when the failure happened at the transport level
    (DNS, connection refused, reset) rather than as an HTTP response.
    """

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(
            message,
            {"status_code": status_code} if status_code is not None else {},
        )
        self.status_code = status_code
        self.body = body


class ExportError(GongwenError):
    """Transcoding or serializing a document failed."""
    pass
