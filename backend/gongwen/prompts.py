"""Prompt construction for document generation.

The system prompt is an on-disk template with a single ``{{ user_input }}``
placeholder. The user's raw text, prefixed with optional mode and document
type hint lines, is substituted there; the user-role message is a fixed
instruction to follow the system prompt.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .core import TemplateError
from .models import AUTO, GenerationRequest, PromptEnvelope

PLACEHOLDER = "{{ user_input }}"
MODE_LABEL = "模式："
DOC_TYPE_LABEL = "文种："


@dataclass(frozen=True)
class PromptTemplate:
    """A system prompt template with exactly one user-input placeholder."""
    text: str

    def __post_init__(self):
        count = self.text.count(PLACEHOLDER)
        if count != 1:
            raise TemplateError(
                f"System prompt template must contain {PLACEHOLDER} exactly once, found {count}"
            )

    @classmethod
    def load(cls, path: Path) -> "PromptTemplate":
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateError(f"Cannot read system prompt template: {e}", str(path)) from e
        return cls(text)

    def render(self, user_input: str) -> str:
        return self.text.replace(PLACEHOLDER, user_input)


def _is_set(value: str | None) -> bool:
    return bool(value) and value.strip() != AUTO


def merge_user_input(user_input: str, mode: str | None = AUTO, doc_type: str | None = AUTO) -> str:
    """Prefix the user's text with hint lines.

    The document type line is added first and the mode line in front of it,
    so the final order is mode, document type, then the raw input.
    """
    merged = user_input or ""
    if _is_set(doc_type):
        merged = f"{DOC_TYPE_LABEL}{doc_type.strip()}\n" + merged
    if _is_set(mode):
        merged = f"{MODE_LABEL}{mode.strip()}\n" + merged
    return merged


def build_envelope(
    request: GenerationRequest,
    template: PromptTemplate,
    instruction: str,
) -> PromptEnvelope:
    """Build the system/user message pair for one request."""
    merged = merge_user_input(request.input, request.mode, request.doc_type)
    return PromptEnvelope(system_prompt=template.render(merged), user_message=instruction)


def build_chat_payload(
    envelope: PromptEnvelope,
    model: str,
    temperature: float,
    stream: bool,
) -> dict[str, Any]:
    """Body for a chat-completions call."""
    return {
        "model": model,
        "messages": envelope.to_messages(),
        "temperature": temperature,
        "stream": stream,
    }
