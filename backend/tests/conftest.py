"""Centralized fixtures and mocks for testing.

Provides an httpx mock transport standing in for the upstream
chat-completion API and factory fixtures for common stream payloads.
"""

import json
import os

# The application refuses to start without a key; tests never reach the network
os.environ.setdefault("DEEPSEEK_API_KEY", "test-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import httpx
import pytest
from fastapi.testclient import TestClient

from gongwen.config import Settings
from gongwen.services.generation import GenerationService
from gongwen.services.upstream import UpstreamClient

UPSTREAM_URL = "https://upstream.test"

# ============================================================================
# Stream Payload Helpers
# ============================================================================


def sse_frame(content: str | None = None, reasoning: str | None = None) -> str:
    """One vendor ``data:`` line carrying a delta."""
    delta = {}
    if reasoning is not None:
        delta["reasoning_content"] = reasoning
    if content is not None:
        delta["content"] = content
    payload = {"choices": [{"index": 0, "delta": delta}]}
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def sse_body(*frames: str, done: bool = True) -> bytes:
    body = "".join(frames)
    if done:
        body += "data: [DONE]\n\n"
    return body.encode("utf-8")


def completion_body(content: str, reasoning: str | None = None) -> dict:
    message = {"role": "assistant", "content": content}
    if reasoning is not None:
        message["reasoning_content"] = reasoning
    return {"id": "cmpl-1", "choices": [{"index": 0, "message": message}]}


async def chunked(*chunks: bytes):
    for chunk in chunks:
        yield chunk


# ============================================================================
# Mock Upstream
# ============================================================================


class MockUpstream:
    """Records requests and answers with a configurable response.

    ``respond`` may be an httpx.Response, an exception instance to raise, or
    a callable producing either from the request.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.respond = httpx.Response(
            200,
            headers={"content-type": "text/event-stream"},
            content=sse_body(sse_frame("你好")),
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        result = self.respond(request) if callable(self.respond) else self.respond
        if isinstance(result, Exception):
            raise result
        return result

    def stream_response(self, *chunks: bytes, status_code: int = 200) -> None:
        """Answer with an event stream delivered in the given chunks."""
        self.respond = lambda request: httpx.Response(
            status_code,
            headers={"content-type": "text/event-stream"},
            content=chunked(*chunks),
        )

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def mock_settings() -> Settings:
    """Create test settings pointing at the mock upstream."""
    return Settings(
        deepseek_api_key="test-key",
        upstream_base_url=UPSTREAM_URL,
        upstream_model="deepseek-chat",
        log_level="WARNING",
    )


@pytest.fixture
def mock_upstream() -> MockUpstream:
    return MockUpstream()


@pytest.fixture
def upstream_client(mock_settings: Settings, mock_upstream: MockUpstream) -> UpstreamClient:
    client = httpx.AsyncClient(transport=httpx.MockTransport(mock_upstream.handler))
    return UpstreamClient(mock_settings, client=client)


@pytest.fixture
def generation_service(mock_settings: Settings, upstream_client: UpstreamClient) -> GenerationService:
    return GenerationService(settings=mock_settings, upstream=upstream_client)


# ============================================================================
# API Test Client Fixtures
# ============================================================================


def _reset_singletons() -> None:
    import gongwen.services.generation as generation_module
    import gongwen.services.schemas as schemas_module
    import gongwen.services.upstream as upstream_module

    generation_module._generation_service = None
    schemas_module._schema_registry = None
    upstream_module._upstream_client = None


@pytest.fixture
def test_client(generation_service: GenerationService):
    """Create a FastAPI test client wired to the mock upstream."""
    import gongwen.services.generation as generation_module

    _reset_singletons()
    generation_module._generation_service = generation_service

    from gongwen.main import app

    with TestClient(app) as client:
        yield client

    _reset_singletons()


def ndjson_events(text: str) -> list[dict]:
    """Decode an NDJSON response body."""
    return [json.loads(line) for line in text.splitlines() if line.strip()]
