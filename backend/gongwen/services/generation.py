"""Generation service: prompt building plus the upstream-to-client relay.

Each request owns its upstream connection and its re-framer state; nothing
is shared across requests and nothing is kept after the stream ends.
"""

import asyncio
import time
from collections.abc import AsyncIterator
from uuid import uuid4

import httpx

from ..config import Settings, get_settings
from ..core import get_logger
from ..models import GenerationRequest, PromptEnvelope, StreamEventType
from ..prompts import PromptTemplate, build_chat_payload, build_envelope
from ..streaming import reframe
from .upstream import UpstreamClient, UpstreamStream, get_upstream_client

logger = get_logger(__name__)


def _message_content(data: dict) -> str:
    """``choices[0].message.content`` of a completion, or an empty string."""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message")
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""


class GenerationService:
    """Service for generating documents through the upstream model."""

    def __init__(
        self,
        settings: Settings | None = None,
        upstream: UpstreamClient | None = None,
        template: PromptTemplate | None = None,
    ):
        """Initialize generation service."""
        self.settings = settings or get_settings()
        self.upstream = upstream or get_upstream_client()
        self._template = template

    @property
    def template(self) -> PromptTemplate:
        """Lazy-load the system prompt template."""
        if self._template is None:
            self._template = PromptTemplate.load(self.settings.system_prompt_path)
        return self._template

    def build_envelope(self, request: GenerationRequest) -> PromptEnvelope:
        return build_envelope(request, self.template, self.settings.user_instruction)

    def _payload(self, request: GenerationRequest, stream: bool) -> dict:
        return build_chat_payload(
            self.build_envelope(request),
            model=self.settings.upstream_model,
            temperature=self.settings.upstream_temperature,
            stream=stream,
        )

    async def open_event_stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        """Open the upstream stream and return an iterator of NDJSON lines.

        The upstream status is checked here, before the caller starts a
        response, so failures can still become a proper error status.

        Raises:
            UpstreamError: upstream unreachable or returned non-2xx
        """
        generation_id = str(uuid4())
        payload = self._payload(request, stream=True)

        logger.audit(
            action="generation_started",
            resource_type="generation",
            resource_id=generation_id,
            input_length=len(request.input),
            mode=request.mode,
            doc_type=request.doc_type,
            streaming=True,
        )

        stream = await self.upstream.open_stream(payload)
        return self._relay(stream, generation_id)

    async def _relay(self, stream: UpstreamStream, generation_id: str) -> AsyncIterator[str]:
        """Re-frame upstream chunks into NDJSON, one line per event."""
        start_time = time.time()
        counts = {StreamEventType.REASONING: 0, StreamEventType.CONTENT: 0}
        completed = False

        try:
            async for event in reframe(stream.aiter_chunks()):
                counts[event.type] += 1
                yield event.to_ndjson()
            completed = True
        except httpx.HTTPError as e:
            # Already-sent events stand; the client sees a short stream
            logger.error(
                "Upstream stream interrupted",
                generation_id=generation_id,
                error=e.__class__.__name__,
            )
        finally:
            logger.audit(
                action="generation_completed",
                resource_type="generation",
                resource_id=generation_id,
                completed=completed,
                reasoning_events=counts[StreamEventType.REASONING],
                content_events=counts[StreamEventType.CONTENT],
                duration_ms=round((time.time() - start_time) * 1000, 1),
            )
            # Shielded so a client disconnect still releases the upstream connection
            await asyncio.shield(stream.aclose())

    async def generate(self, request: GenerationRequest) -> str:
        """Non-streaming generation; returns the final content only.

        Raises:
            UpstreamError: upstream unreachable or returned non-2xx
        """
        generation_id = str(uuid4())
        start_time = time.time()

        logger.audit(
            action="generation_started",
            resource_type="generation",
            resource_id=generation_id,
            input_length=len(request.input),
            mode=request.mode,
            doc_type=request.doc_type,
            streaming=False,
        )

        data = await self.upstream.complete(self._payload(request, stream=False))
        content = _message_content(data)

        logger.audit(
            action="generation_completed",
            resource_type="generation",
            resource_id=generation_id,
            completed=True,
            content_length=len(content),
            duration_ms=round((time.time() - start_time) * 1000, 1),
        )
        return content


# Singleton instance
_generation_service: GenerationService | None = None


def get_generation_service() -> GenerationService:
    """Get the singleton generation service instance."""
    global _generation_service
    if _generation_service is None:
        _generation_service = GenerationService()
    return _generation_service
