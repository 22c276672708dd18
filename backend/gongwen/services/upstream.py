"""Client for the upstream chat-completion API.

Opens the request, checks the status before anything is relayed, and hands
back the raw body. Vendor framing is left to the re-framer. Failures are
surfaced once as UpstreamError; nothing is retried.
"""

from collections.abc import AsyncIterator
from typing import Any

import httpx

from ..config import Settings, get_settings
from ..core import UpstreamError, get_logger

logger = get_logger(__name__)

CHAT_COMPLETIONS_PATH = "/chat/completions"
EVENT_STREAM_MEDIA_TYPE = "text/event-stream"
MAX_ERROR_BODY_CHARS = 2000


class UpstreamStream:
    """An open streaming response from the upstream API."""

    def __init__(self, response: httpx.Response):
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def is_event_stream(self) -> bool:
        return EVENT_STREAM_MEDIA_TYPE in self._response.headers.get("content-type", "")

    async def aiter_chunks(self) -> AsyncIterator[bytes]:
        """Yield raw body chunks in arrival order.

        A response that is not an event stream is read whole and yielded as a
        single chunk.
        """
        if not self.is_event_stream:
            body = await self._response.aread()
            if body:
                yield body
            return

        async for chunk in self._response.aiter_bytes():
            if chunk:
                yield chunk

    async def aclose(self) -> None:
        await self._response.aclose()


class UpstreamClient:
    """Thin httpx wrapper around the chat-completions endpoint."""

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = settings or get_settings()
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.upstream_base_url,
                timeout=httpx.Timeout(None, connect=self.settings.upstream_connect_timeout),
            )
            logger.info(
                "Created upstream client",
                base_url=self.settings.upstream_base_url,
                model=self.settings.upstream_model,
            )
        return self._client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.require_api_key()}",
            "Content-Type": "application/json",
        }

    def _url(self) -> str:
        return self.settings.upstream_base_url.rstrip("/") + CHAT_COMPLETIONS_PATH

    async def open_stream(self, payload: dict[str, Any]) -> UpstreamStream:
        """Send a streaming request and return once the status is known.

        Raises:
            UpstreamError: transport failure or non-2xx status (body attached)
        """
        request = self.client.build_request("POST", self._url(), json=payload, headers=self._headers())
        try:
            response = await self.client.send(request, stream=True)
        except httpx.HTTPError as e:
            logger.error("Upstream request failed", error=e.__class__.__name__)
            raise UpstreamError(f"Upstream request failed: {e.__class__.__name__}") from e

        if response.is_success:
            return UpstreamStream(response)

        try:
            body = (await response.aread()).decode("utf-8", "replace")
        except httpx.HTTPError:
            body = ""
        finally:
            await response.aclose()

        logger.error("Upstream returned error status", status_code=response.status_code)
        raise UpstreamError(
            f"Upstream returned status {response.status_code}",
            status_code=response.status_code,
            body=body[:MAX_ERROR_BODY_CHARS],
        )

    async def complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Non-streaming call; returns the decoded completion object."""
        try:
            response = await self.client.post(self._url(), json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error("Upstream request failed", error=e.__class__.__name__)
            raise UpstreamError(f"Upstream request failed: {e.__class__.__name__}") from e

        if not response.is_success:
            logger.error("Upstream returned error status", status_code=response.status_code)
            raise UpstreamError(
                f"Upstream returned status {response.status_code}",
                status_code=response.status_code,
                body=response.text[:MAX_ERROR_BODY_CHARS],
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(
                "Upstream returned a non-JSON body",
                status_code=response.status_code,
                body=response.text[:MAX_ERROR_BODY_CHARS],
            ) from e
        if not isinstance(data, dict):
            raise UpstreamError("Upstream returned an unexpected body", status_code=response.status_code)
        return data

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None


# Singleton instance
_upstream_client: UpstreamClient | None = None


def get_upstream_client() -> UpstreamClient:
    """Get the singleton upstream client instance."""
    global _upstream_client
    if _upstream_client is None:
        _upstream_client = UpstreamClient()
    return _upstream_client


async def close_upstream_client() -> None:
    global _upstream_client
    if _upstream_client is not None:
        await _upstream_client.aclose()
        _upstream_client = None
