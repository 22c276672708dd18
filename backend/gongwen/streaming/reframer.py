"""Vendor SSE frames to normalized NDJSON events.

The upstream API streams lines such as::

    data: {"choices":[{"delta":{"reasoning_content":"...","content":"..."}}]}
    data: [DONE]

Each complete ``data:`` line is turned into at most two StreamEvents
(reasoning first, then content) as soon as it is read. Chunk boundaries
never matter: partial lines wait in the buffer for the next chunk.
"""

import json
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

from ..models import StreamEvent, StreamEventType
from .lines import LineBuffer, parse_completion, pick_reasoning

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


def extract_delta_events(frame: Any) -> list[StreamEvent]:
    """Pull reasoning/content deltas out of one decoded frame."""
    if not isinstance(frame, dict):
        return []
    choices = frame.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return []
    delta = choices[0].get("delta")
    if not isinstance(delta, dict):
        return []

    events = []
    reasoning = pick_reasoning(delta)
    if reasoning:
        events.append(StreamEvent(StreamEventType.REASONING, reasoning))
    content = delta.get("content")
    if isinstance(content, str) and content:
        events.append(StreamEvent(StreamEventType.CONTENT, content))
    return events


class FrameReframer:
    """Stateful re-framer for a single upstream response.

    Feed raw chunks in arrival order with :meth:`feed`, then call
    :meth:`finish` exactly once when the upstream body is exhausted.
    """

    def __init__(self):
        self._lines = LineBuffer()
        self.done = False
        self.events_emitted = 0

    def feed(self, chunk: bytes | str) -> list[StreamEvent]:
        """Consume one chunk and return the events completed by it."""
        if self.done:
            return []

        events: list[StreamEvent] = []
        for line in self._lines.feed(chunk):
            events.extend(self._handle_line(line))
            if self.done:
                break
        return self._emit(events)

    def finish(self) -> list[StreamEvent]:
        """Drain the buffer and apply the non-streaming fallback if needed."""
        events: list[StreamEvent] = []
        tail = self._lines.flush()
        if not self.done and tail.strip():
            events.extend(self._handle_line(tail))

        if not events and self.events_emitted == 0:
            events.extend(self._fallback(self._lines.raw))

        self.done = True
        return self._emit(events)

    def _handle_line(self, line: str) -> list[StreamEvent]:
        trimmed = line.strip()
        if not trimmed or not trimmed.startswith(DATA_PREFIX):
            return []

        payload = trimmed[len(DATA_PREFIX):].strip()
        if not payload:
            return []
        if payload == DONE_SENTINEL:
            self.done = True
            return []

        try:
            frame = json.loads(payload)
        except ValueError:
            # A broken frame costs one delta, not the stream
            return []

        return extract_delta_events(frame)

    @staticmethod
    def _fallback(raw: str) -> list[StreamEvent]:
        """Treat the whole body as one non-streaming completion, or as text."""
        if not raw.strip():
            return []

        parsed = parse_completion(raw)
        if parsed is None:
            return [StreamEvent(StreamEventType.CONTENT, raw)]

        reasoning, content = parsed
        events = []
        if reasoning:
            events.append(StreamEvent(StreamEventType.REASONING, reasoning))
        if content:
            events.append(StreamEvent(StreamEventType.CONTENT, content))
        return events

    def _emit(self, events: list[StreamEvent]) -> list[StreamEvent]:
        if events and self.events_emitted == 0:
            self._lines.discard_raw()
        self.events_emitted += len(events)
        return events


async def reframe(chunks: AsyncIterable[bytes | str]) -> AsyncIterator[StreamEvent]:
    """Re-frame an upstream body as it arrives.

    The next chunk is only pulled after the events of the previous one have
    been consumed, so a slow downstream slows the upstream read as well.
    """
    reframer = FrameReframer()
    async for chunk in chunks:
        for event in reframer.feed(chunk):
            yield event
        if reframer.done:
            break
    for event in reframer.finish():
        yield event
