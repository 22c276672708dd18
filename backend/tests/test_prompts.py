"""Tests for prompt construction."""

import pytest

from gongwen.config import RESOURCES_DIR
from gongwen.core import TemplateError
from gongwen.models import GenerationRequest
from gongwen.prompts import (
    PLACEHOLDER,
    PromptTemplate,
    build_chat_payload,
    build_envelope,
    merge_user_input,
)

INSTRUCTION = "请按系统提示处理。"


class TestPromptTemplate:
    """Tests for the system prompt template."""

    def test_requires_exactly_one_placeholder(self):
        with pytest.raises(TemplateError):
            PromptTemplate("no placeholder here")
        with pytest.raises(TemplateError):
            PromptTemplate(f"{PLACEHOLDER} and again {PLACEHOLDER}")

    def test_render_substitutes(self):
        template = PromptTemplate(f"前言\n{PLACEHOLDER}\n结尾")

        assert template.render("材料") == "前言\n材料\n结尾"

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(TemplateError) as exc_info:
            PromptTemplate.load(tmp_path / "missing.jinja")

        assert "missing.jinja" in exc_info.value.details["path"]

    def test_bundled_template_is_valid(self):
        template = PromptTemplate.load(RESOURCES_DIR / "system_prompt.jinja")

        assert "季度报告" in template.render("季度报告")


class TestMergeUserInput:
    """Tests for hint-line merging."""

    def test_auto_adds_nothing(self):
        assert merge_user_input("原文") == "原文"

    def test_mode_line_comes_first(self):
        merged = merge_user_input("原文", mode="公文生成模式", doc_type="通知")

        assert merged == "模式：公文生成模式\n文种：通知\n原文"

    def test_doc_type_only(self):
        assert merge_user_input("原文", doc_type="请示") == "文种：请示\n原文"

    @pytest.mark.parametrize("value", [None, "", "  ", "auto", " auto "])
    def test_unset_values_are_skipped(self, value):
        assert merge_user_input("原文", mode=value, doc_type=value) == "原文"


class TestBuildEnvelope:
    """Tests for envelope and payload construction."""

    def test_envelope_is_deterministic(self):
        template = PromptTemplate(f"系统：{PLACEHOLDER}")
        request = GenerationRequest(input="写一份通知", mode="公文生成模式", docType="通知")

        first = build_envelope(request, template, INSTRUCTION)
        second = build_envelope(request, template, INSTRUCTION)

        assert first == second
        assert first.system_prompt == "系统：模式：公文生成模式\n文种：通知\n写一份通知"
        assert first.user_message == INSTRUCTION

    def test_chat_payload(self):
        template = PromptTemplate(PLACEHOLDER)
        envelope = build_envelope(GenerationRequest(input="材料"), template, INSTRUCTION)

        payload = build_chat_payload(envelope, "deepseek-chat", 0.2, stream=True)

        assert payload == {
            "model": "deepseek-chat",
            "messages": [
                {"role": "system", "content": "材料"},
                {"role": "user", "content": INSTRUCTION},
            ],
            "temperature": 0.2,
            "stream": True,
        }


class TestGenerationRequest:
    """Tests for request validation."""

    def test_defaults(self):
        request = GenerationRequest(input="x")

        assert request.mode == "auto"
        assert request.doc_type == "auto"

    def test_blank_hints_become_auto(self):
        request = GenerationRequest.model_validate({"input": "x", "mode": "", "docType": None})

        assert request.mode == "auto"
        assert request.doc_type == "auto"

    def test_empty_input_rejected(self):
        with pytest.raises(ValueError):
            GenerationRequest(input="")
