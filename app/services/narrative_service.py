"""
Narrative augmentation for reports.

Session summaries and per-round model answers come from the generative text
provider. Both operations are best-effort: a disabled flag, a missing
provider or any provider error yields None/"" and the caller substitutes the
canned fallback text.
"""
import logging
from typing import Any, Mapping, Optional, Sequence

from app.core.flags import AnalyticsFlags
from app.llm.provider import TextGenerator
from app.llm.router import get_model_for_feature
from app.schemas.report import CoverageResult

logger = logging.getLogger(__name__)

FALLBACK_ONE_LINER = "강점은 의사소통/태도, 사례 구체화 보완 필요"
FALLBACK_MODEL_ANSWER_DIFF = "모범답안은 사례 기반·정량 성과 제시, 실제 답변은 원론적 설명 위주"

SUMMARY_SYSTEM_PROMPT = "과장 금지, 한국어, 간결."
MODEL_ANSWER_SYSTEM_PROMPT = "면접 코치. 한국어. 간결하고 구조화."

SUMMARY_MAX_ROUNDS = 5
SUMMARY_EXCERPT_CHARS = 220


def build_summary_prompt(
    total_score: int,
    coverage: CoverageResult,
    answers: Sequence[str],
    highlights: Sequence[str] = (),
    improvements: Sequence[str] = (),
) -> str:
    """Fixed prompt: scores, coverage gaps and a bounded excerpt of the answers."""
    bullets = [
        f"{i + 1}) {(answer or '')[:SUMMARY_EXCERPT_CHARS]}"
        for i, answer in enumerate(list(answers)[:SUMMARY_MAX_ROUNDS])
    ]
    return "\n".join([
        f"세션 점수={total_score}",
        f"강점={', '.join(highlights)}",
        f"개선={', '.join(improvements)}",
        f"루브릭 커버리지={coverage.coverage_pct}% (누락: {', '.join(coverage.missing)})",
        f"아래는 라운드별 핵심답변 요약(최대 {SUMMARY_MAX_ROUNDS}개):",
        "\n".join(bullets),
        "",
        "요청: 1) 3~5문장 요약  2) 다음 연습을 위한 구체 문장 2개(누락 보완)",
    ])


def build_model_answer_prompt(round_lite: Mapping[str, Any]) -> str:
    return (
        f"질문: {round_lite.get('question') or ''}\n"
        f"의도: {round_lite.get('type') or ''}\n\n"
        "요청: 5~7문장 모범답안. 결론 먼저, 수치/영향 포함."
    )


def _safe_generate(
    generator: TextGenerator,
    feature: str,
    system: str,
    user: str,
    flags: AnalyticsFlags,
) -> Optional[str]:
    try:
        text = generator.generate(
            system,
            user,
            model=get_model_for_feature(feature, flags),
            temperature=flags.temperature,
        )
    except Exception as e:
        logger.warning(f"Narrative generation failed for {feature}, using fallback: {e}")
        return None
    text = (text or "").strip()
    return text or None


def generate_summary(
    total_score: int,
    coverage: CoverageResult,
    answers: Sequence[str],
    flags: AnalyticsFlags,
    generator: TextGenerator,
) -> Optional[str]:
    """Session-level prose summary, or None when augmentation is unavailable."""
    if not flags.use_openai:
        return None
    prompt = build_summary_prompt(total_score, coverage, answers)
    return _safe_generate(generator, "report_summary", SUMMARY_SYSTEM_PROMPT, prompt, flags)


def generate_model_answer(
    round_lite: Mapping[str, Any],
    flags: AnalyticsFlags,
    generator: TextGenerator,
) -> str:
    """Model answer for one round, or "" when augmentation is unavailable."""
    if not flags.use_openai:
        return ""
    prompt = build_model_answer_prompt(round_lite or {})
    return _safe_generate(generator, "model_answer", MODEL_ANSWER_SYSTEM_PROMPT, prompt, flags) or ""
