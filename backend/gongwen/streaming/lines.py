"""Incremental line splitting shared by every stream parser in the project.

Both the server-side re-framer (vendor SSE frames in) and the client-side
consumer (NDJSON events in) receive arbitrarily fragmented byte chunks and
must only ever parse complete lines. This module owns that buffering, the
UTF-8 reassembly, and the fallback parsing of a non-streaming completion body.
"""

import codecs
import json
from typing import Any

REASONING_KEYS = ("reasoning_content", "reasoning", "thinking")


class LineBuffer:
    """Accumulates chunks and hands out complete lines.

    The trailing segment after the last newline is retained until more data
    arrives or :meth:`flush` is called at end of stream. Multi-byte UTF-8
    sequences split across chunk boundaries are reassembled.
    """

    def __init__(self, encoding: str = "utf-8", keep_raw: bool = True):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending = ""
        self._raw: list[str] = []
        self.keep_raw = keep_raw

    def feed(self, chunk: bytes | str) -> list[str]:
        """Add a chunk; return the lines it completed, without terminators."""
        text = chunk if isinstance(chunk, str) else self._decoder.decode(chunk)
        if not text:
            return []
        self._remember(text)

        self._pending += text
        *lines, self._pending = self._pending.split("\n")
        return [line.rstrip("\r") for line in lines]

    def flush(self) -> str:
        """Return whatever is left once the stream has ended."""
        tail = self._decoder.decode(b"", final=True)
        if tail:
            self._remember(tail)
            self._pending += tail
        rest, self._pending = self._pending, ""
        return rest.rstrip("\r")

    def discard_raw(self) -> None:
        """Stop keeping the raw text; it is only needed for fallback parsing."""
        self.keep_raw = False
        self._raw.clear()

    @property
    def raw(self) -> str:
        return "".join(self._raw)

    def _remember(self, text: str) -> None:
        if self.keep_raw:
            self._raw.append(text)


def pick_reasoning(fields: dict[str, Any]) -> str:
    """Return the first non-empty reasoning field; vendors disagree on the name."""
    for key in REASONING_KEYS:
        value = fields.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def parse_completion(raw: str) -> tuple[str, str] | None:
    """Parse a whole non-streaming chat completion body.

    Returns ``(reasoning, content)`` taken from ``choices[0].message``, with
    empty strings when the JSON is valid but carries no message. Returns None
    when ``raw`` is not JSON at all.
    """
    try:
        data = json.loads(raw)
    except ValueError:
        return None

    message = None
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message")

    if not isinstance(message, dict):
        return "", ""

    content = message.get("content")
    return pick_reasoning(message), content if isinstance(content, str) else ""
