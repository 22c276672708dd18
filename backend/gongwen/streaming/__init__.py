"""Stream parsing shared by the server re-framer and the client consumer."""

from .consumer import StreamConsumer
from .lines import LineBuffer, parse_completion, pick_reasoning
from .reframer import DATA_PREFIX, DONE_SENTINEL, FrameReframer, extract_delta_events, reframe

__all__ = [
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "FrameReframer",
    "LineBuffer",
    "StreamConsumer",
    "extract_delta_events",
    "parse_completion",
    "pick_reasoning",
    "reframe",
]
