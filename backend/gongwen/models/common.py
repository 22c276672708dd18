"""Common data models shared by the streaming pipeline and the services.

The stream event shape is the single wire contract between the server-side
re-framer and every consumer (browser or Python client).
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any


class StreamEventType(str, Enum):
    """Kinds of incremental text carried by the normalized stream."""
    REASONING = "reasoning"
    CONTENT = "content"


class GenerationMode(str, Enum):
    """Known generation modes.

    Any other string is forwarded verbatim into the prompt; these are the
    values the bundled front-end sends.
    """
    AUTO = "auto"
    QA = "商务问答模式"
    DOCUMENT = "公文生成模式"


AUTO = GenerationMode.AUTO.value


@dataclass(frozen=True)
class StreamEvent:
    """One normalized delta: ``{"type": "reasoning"|"content", "delta": "..."}``."""
    type: StreamEventType
    delta: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type.value, "delta": self.delta}

    def to_ndjson(self) -> str:
        """Encode as one NDJSON line (non-ASCII kept as-is)."""
        return json.dumps(self.to_dict(), ensure_ascii=False) + "\n"

    @classmethod
    def from_dict(cls, data: Any) -> "StreamEvent | None":
        """Decode a parsed NDJSON object; returns None for anything unusable."""
        if not isinstance(data, dict):
            return None
        delta = data.get("delta")
        if not isinstance(delta, str) or not delta:
            return None
        try:
            event_type = StreamEventType(data.get("type"))
        except ValueError:
            return None
        return cls(type=event_type, delta=delta)


@dataclass(frozen=True)
class PromptEnvelope:
    """System prompt plus the fixed user message for one generation."""
    system_prompt: str
    user_message: str

    def to_messages(self) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": self.user_message},
        ]
