"""Tests for vendor frame re-framing."""

import pytest

from conftest import chunked, sse_body, sse_frame
from gongwen.models import StreamEvent, StreamEventType
from gongwen.streaming import FrameReframer, LineBuffer, extract_delta_events, reframe

REASONING = StreamEventType.REASONING
CONTENT = StreamEventType.CONTENT


def run_reframer(*chunks: bytes | str) -> list[StreamEvent]:
    reframer = FrameReframer()
    events = []
    for chunk in chunks:
        events.extend(reframer.feed(chunk))
    events.extend(reframer.finish())
    return events


def split_every(data: bytes, size: int) -> list[bytes]:
    return [data[i:i + size] for i in range(0, len(data), size)]


class TestLineBuffer:
    """Tests for the shared line buffer."""

    def test_keeps_partial_line_until_newline(self):
        buffer = LineBuffer()

        assert buffer.feed(b"data: abc") == []
        assert buffer.feed(b"def\nda") == ["data: abcdef"]
        assert buffer.flush() == "da"

    def test_strips_carriage_returns(self):
        buffer = LineBuffer()

        assert buffer.feed(b"one\r\ntwo\r\n") == ["one", "two"]

    def test_reassembles_split_utf8(self):
        data = "标题\n".encode("utf-8")
        buffer = LineBuffer()

        lines = []
        for i in range(len(data)):
            lines.extend(buffer.feed(data[i:i + 1]))

        assert lines == ["标题"]

    def test_raw_can_be_discarded(self):
        buffer = LineBuffer()
        buffer.feed(b"abc")
        assert buffer.raw == "abc"

        buffer.discard_raw()
        buffer.feed(b"def")

        assert buffer.raw == ""


class TestExtractDeltaEvents:
    """Tests for pulling deltas out of one frame."""

    def test_reasoning_before_content(self):
        frame = {"choices": [{"delta": {"content": "答", "reasoning_content": "想"}}]}

        events = extract_delta_events(frame)

        assert events == [StreamEvent(REASONING, "想"), StreamEvent(CONTENT, "答")]

    @pytest.mark.parametrize("key", ["reasoning_content", "reasoning", "thinking"])
    def test_reasoning_field_names(self, key):
        events = extract_delta_events({"choices": [{"delta": {key: "想"}}]})

        assert events == [StreamEvent(REASONING, "想")]

    @pytest.mark.parametrize(
        "frame",
        [
            {"choices": []},
            {"choices": [{"delta": {"role": "assistant"}}]},
            {"choices": [{"delta": {"content": ""}}]},
            {"choices": [{"delta": None}]},
            {"id": "x"},
            ["not", "an", "object"],
        ],
    )
    def test_frames_without_deltas(self, frame):
        assert extract_delta_events(frame) == []


class TestFrameReframer:
    """Tests for FrameReframer."""

    def test_emits_deltas_in_order(self):
        body = sse_body(
            sse_frame(reasoning="先想"),
            sse_frame(content="【标题】"),
            sse_frame(content="季度报告"),
        )

        events = run_reframer(body)

        assert events == [
            StreamEvent(REASONING, "先想"),
            StreamEvent(CONTENT, "【标题】"),
            StreamEvent(CONTENT, "季度报告"),
        ]

    def test_emits_per_line_without_waiting_for_end(self):
        reframer = FrameReframer()

        events = reframer.feed(sse_frame(content="一").encode("utf-8"))

        assert events == [StreamEvent(CONTENT, "一")]

    def test_chunking_invariance(self):
        body = sse_body(
            sse_frame(reasoning="分析需求"),
            sse_frame(content="关于召开"),
            sse_frame(content="年度会议的通知"),
            sse_frame(reasoning="补充", content="。"),
        )
        expected = run_reframer(body)

        assert len(expected) == 5
        for size in (1, 2, 3, 7, 64):
            assert run_reframer(*split_every(body, size)) == expected
        for cut in range(1, len(body)):
            assert run_reframer(body[:cut], body[cut:]) == expected

    def test_done_stops_reading(self):
        body = sse_body(sse_frame(content="前")) + sse_frame(content="后").encode("utf-8")
        reframer = FrameReframer()

        events = reframer.feed(body)

        assert events == [StreamEvent(CONTENT, "前")]
        assert reframer.done
        assert reframer.feed(sse_frame(content="更多").encode("utf-8")) == []
        assert reframer.finish() == []

    def test_lines_before_done_in_same_chunk_are_drained(self):
        body = (sse_frame(content="甲") + sse_frame(content="乙") + "data: [DONE]\n").encode("utf-8")

        assert run_reframer(body) == [StreamEvent(CONTENT, "甲"), StreamEvent(CONTENT, "乙")]

    def test_malformed_json_is_skipped(self):
        body = sse_body(
            sse_frame(content="好"),
            "data: {not json\n\n",
            sse_frame(content="的"),
        )

        assert run_reframer(body) == [StreamEvent(CONTENT, "好"), StreamEvent(CONTENT, "的")]

    def test_non_data_lines_are_ignored(self):
        body = sse_body(
            ": keep-alive\n",
            "event: message\n",
            "id: 7\n",
            "data:\n",
            sse_frame(content="文"),
        )

        assert run_reframer(body) == [StreamEvent(CONTENT, "文")]

    def test_crlf_framing(self):
        body = sse_frame(content="甲").replace("\n", "\r\n").encode("utf-8")

        assert run_reframer(body) == [StreamEvent(CONTENT, "甲")]

    def test_trailing_line_without_newline_is_parsed_at_end(self):
        body = sse_frame(content="甲").rstrip("\n").encode("utf-8")
        reframer = FrameReframer()

        assert reframer.feed(body) == []
        assert reframer.finish() == [StreamEvent(CONTENT, "甲")]

    def test_stream_without_deltas_is_passed_through(self):
        body = sse_body('data: {"choices":[{"delta":{"role":"assistant"}}]}\n\n')

        assert run_reframer(body) == [StreamEvent(CONTENT, body.decode("utf-8"))]

    def test_stream_without_deltas_chunked(self):
        body = sse_body('data: {"choices":[{"delta":{"role":"assistant"}}]}\n\n')

        events = run_reframer(*split_every(body, 3))

        assert len(events) == 1
        assert events[0].type == CONTENT
        assert events[0].delta.rstrip("\n") == body.decode("utf-8").rstrip("\n")

    def test_empty_body_emits_nothing(self):
        assert run_reframer(b"") == []


class TestReframerFallback:
    """Tests for the non-streaming fallback path."""

    def test_single_completion_object(self):
        body = '{"choices":[{"message":{"role":"assistant","content":"你好"}}]}'.encode("utf-8")

        assert run_reframer(body) == [StreamEvent(CONTENT, "你好")]

    def test_pretty_printed_completion_split_across_chunks(self):
        body = (
            '{\n  "choices": [\n    {\n      "message": {\n'
            '        "reasoning_content": "思考",\n        "content": "你好"\n'
            "      }\n    }\n  ]\n}\n"
        ).encode("utf-8")

        events = run_reframer(*split_every(body, 5))

        assert events == [StreamEvent(REASONING, "思考"), StreamEvent(CONTENT, "你好")]

    def test_unparseable_body_is_passed_through(self):
        assert run_reframer(b"upstream said something odd") == [
            StreamEvent(CONTENT, "upstream said something odd")
        ]

    def test_json_without_message_yields_nothing(self):
        assert run_reframer(b'{"object": "error"}') == []

    def test_no_fallback_after_events(self):
        body = sse_body(sse_frame(content="甲")) + b"trailing garbage"

        assert run_reframer(body) == [StreamEvent(CONTENT, "甲")]


class TestReframeAsync:
    """Tests for the async re-framing generator."""

    @pytest.mark.asyncio
    async def test_reframe_iterates_chunks(self):
        body = sse_body(sse_frame(reasoning="想"), sse_frame(content="写"))
        chunks = split_every(body, 4)

        events = [event async for event in reframe(chunked(*chunks))]

        assert events == [StreamEvent(REASONING, "想"), StreamEvent(CONTENT, "写")]

    @pytest.mark.asyncio
    async def test_reframe_stops_pulling_after_done(self):
        pulled = []

        async def source():
            for chunk in (sse_body(sse_frame(content="甲")), b"never read"):
                pulled.append(chunk)
                yield chunk

        events = [event async for event in reframe(source())]

        assert events == [StreamEvent(CONTENT, "甲")]
        assert len(pulled) == 1
