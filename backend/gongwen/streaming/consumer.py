"""Receiving side of the NDJSON event stream.

Rebuilds the "thinking" and "answer" texts from interleaved reasoning and
content deltas, one event at a time, so callers can render progressively.
The content buffer is the canonical final text used for export.
"""

import json
from collections.abc import AsyncIterable, AsyncIterator, Callable

from ..models import StreamEvent, StreamEventType
from .lines import LineBuffer, parse_completion


class StreamConsumer:
    """Accumulates events from ``/api/generate-stream`` chunks."""

    def __init__(self, on_event: Callable[[StreamEvent], None] | None = None):
        self._lines = LineBuffer()
        self._reasoning: list[str] = []
        self._content: list[str] = []
        self.on_event = on_event
        self.events_seen = 0
        self.finished = False
        # Set by callers when the transport broke before a clean end
        self.interrupted = False

    @property
    def reasoning_text(self) -> str:
        return "".join(self._reasoning)

    @property
    def content_text(self) -> str:
        return "".join(self._content)

    def feed(self, chunk: bytes | str) -> list[StreamEvent]:
        """Parse the complete NDJSON lines in ``chunk`` and apply them."""
        events = []
        for line in self._lines.feed(chunk):
            event = self._parse_line(line)
            if event is not None:
                events.append(self._accept(event))
        return events

    def finish(self) -> list[StreamEvent]:
        """Apply the last line and, if nothing parsed at all, the raw fallback.

        The fallback is skipped for an interrupted stream: a fragment of an
        event line is not a reply.
        """
        events = []
        tail = self._lines.flush()
        event = self._parse_line(tail)
        if event is not None:
            events.append(self._accept(event))

        if self.events_seen == 0 and not self.interrupted:
            events.extend(self._accept(e) for e in self._fallback(self._lines.raw))

        self.finished = True
        return events

    async def consume(self, chunks: AsyncIterable[bytes | str]) -> AsyncIterator[StreamEvent]:
        """Feed every chunk and yield events as soon as they are complete."""
        async for chunk in chunks:
            for event in self.feed(chunk):
                yield event
        for event in self.finish():
            yield event

    @staticmethod
    def _parse_line(line: str) -> StreamEvent | None:
        trimmed = line.strip()
        if not trimmed:
            return None
        try:
            data = json.loads(trimmed)
        except ValueError:
            return None
        return StreamEvent.from_dict(data)

    @staticmethod
    def _fallback(raw: str) -> list[StreamEvent]:
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

    def _accept(self, event: StreamEvent) -> StreamEvent:
        if self.events_seen == 0:
            self._lines.discard_raw()
        self.events_seen += 1
        if event.type == StreamEventType.REASONING:
            self._reasoning.append(event.delta)
        else:
            self._content.append(event.delta)
        if self.on_event is not None:
            self.on_event(event)
        return event
