"""HTTP client for a running gongwen writer server.

Uses the same StreamConsumer as any other consumer of ``/api/generate-stream``
so there is exactly one NDJSON parser in the project.
"""

import re
from collections.abc import Callable
from urllib.parse import unquote

import httpx

from .core import ExportError, GenerationError
from .models import AUTO, StreamEvent
from .streaming import StreamConsumer

FILENAME_STAR_PATTERN = re.compile(r"filename\*=UTF-8''([^;]+)", re.IGNORECASE)
FILENAME_PATTERN = re.compile(r'filename="([^"]+)"', re.IGNORECASE)


def filename_from_disposition(header: str | None, default: str = "公文.docx") -> str:
    """Decode the download name from a Content-Disposition header."""
    if not header:
        return default
    match = FILENAME_STAR_PATTERN.search(header) or FILENAME_PATTERN.search(header)
    if not match:
        return default
    return unquote(match.group(1).strip()) or default


class GongwenClient:
    """Async client for the generation and export endpoints."""

    def __init__(self, base_url: str = "http://localhost:3000", client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(None, connect=10.0))

    async def __aenter__(self) -> "GongwenClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def stream_generate(
        self,
        input: str,
        mode: str = AUTO,
        doc_type: str = AUTO,
        on_event: Callable[[StreamEvent], None] | None = None,
    ) -> StreamConsumer:
        """Run a streaming generation and return the filled consumer.

        ``on_event`` is called for every delta as it arrives. If the
        connection breaks mid-stream the consumer keeps what was received and
        has ``interrupted`` set.

        Raises:
            GenerationError: the server rejected the request or upstream failed
        """
        consumer = StreamConsumer(on_event=on_event)
        payload = {"input": input, "mode": mode, "docType": doc_type}

        async with self._client.stream(
            "POST", f"{self.base_url}/api/generate-stream", json=payload
        ) as response:
            if not response.is_success:
                body = (await response.aread()).decode("utf-8", "replace")
                raise GenerationError(
                    f"Generation failed with status {response.status_code}",
                    {"status_code": response.status_code, "body": body[:2000]},
                )
            try:
                async for chunk in response.aiter_bytes():
                    consumer.feed(chunk)
            except httpx.HTTPError:
                consumer.interrupted = True

        consumer.finish()
        return consumer

    async def export_docx(self, content: str, filename: str | None = None) -> tuple[str, bytes]:
        """Export text to .docx; returns ``(download_name, data)``.

        Raises:
            ExportError: the server could not produce the document
        """
        payload = {"content": content}
        if filename:
            payload["filename"] = filename

        response = await self._client.post(f"{self.base_url}/api/export-docx", json=payload)
        if not response.is_success:
            raise ExportError(
                f"Export failed with status {response.status_code}",
                {"status_code": response.status_code},
            )
        return filename_from_disposition(response.headers.get("content-disposition")), response.content
