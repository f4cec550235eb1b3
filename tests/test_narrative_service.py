"""
Unit tests for narrative augmentation (summary and model answers).
"""
from app.core.flags import resolve_flags
from app.llm.provider import NullTextGenerator, TextGenerator
from app.schemas.report import CoverageResult
from app.services.narrative_service import (
    SUMMARY_EXCERPT_CHARS,
    build_summary_prompt,
    generate_model_answer,
    generate_summary,
)

FLAGS_ON = resolve_flags({"openai": True}, env={})
FLAGS_OFF = resolve_flags({"openai": False}, env={})
COVERAGE = CoverageResult(coverage_pct=60, matched=["논리 구조"], missing=["인사이트"])


class RecordingGenerator(TextGenerator):
    def __init__(self, reply="  요약 문장입니다.  "):
        self.reply = reply
        self.calls = []

    def generate(self, system, user, model=None, temperature=None):
        self.calls.append({"system": system, "user": user, "model": model, "temperature": temperature})
        return self.reply


class BrokenGenerator(TextGenerator):
    def generate(self, system, user, model=None, temperature=None):
        raise TimeoutError("provider timed out")


def test_summary_disabled_does_not_call_generator():
    generator = RecordingGenerator()
    assert generate_summary(70, COVERAGE, ["답변"], FLAGS_OFF, generator) is None
    assert generator.calls == []


def test_summary_is_stripped_and_uses_configured_model():
    generator = RecordingGenerator()
    text = generate_summary(70, COVERAGE, ["답변"], FLAGS_ON, generator)

    assert text == "요약 문장입니다."
    assert generator.calls[0]["model"] == FLAGS_ON.analysis_model
    assert generator.calls[0]["temperature"] == FLAGS_ON.temperature
    assert "세션 점수=70" in generator.calls[0]["user"]
    assert "누락: 인사이트" in generator.calls[0]["user"]


def test_summary_provider_failure_returns_none():
    assert generate_summary(70, COVERAGE, ["답변"], FLAGS_ON, BrokenGenerator()) is None


def test_blank_reply_returns_none():
    assert generate_summary(70, COVERAGE, ["답변"], FLAGS_ON, RecordingGenerator(reply="   ")) is None
    assert generate_summary(70, COVERAGE, ["답변"], FLAGS_ON, NullTextGenerator()) is None


def test_summary_prompt_is_bounded():
    answers = ["가" * 500] * 7
    prompt = build_summary_prompt(50, COVERAGE, answers)

    assert "5) " in prompt
    assert "6) " not in prompt
    assert "가" * SUMMARY_EXCERPT_CHARS in prompt
    assert "가" * (SUMMARY_EXCERPT_CHARS + 1) not in prompt


def test_model_answer():
    generator = RecordingGenerator(reply="결론부터 말씀드리면...")
    answer = generate_model_answer({"question": "지원 동기는?", "type": "motivation"}, FLAGS_ON, generator)

    assert answer == "결론부터 말씀드리면..."
    assert "질문: 지원 동기는?" in generator.calls[0]["user"]


def test_model_answer_unavailable_is_empty():
    assert generate_model_answer({"question": "Q"}, FLAGS_OFF, RecordingGenerator()) == ""
    assert generate_model_answer({"question": "Q"}, FLAGS_ON, BrokenGenerator()) == ""
    assert generate_model_answer(None, FLAGS_ON, NullTextGenerator()) == ""
