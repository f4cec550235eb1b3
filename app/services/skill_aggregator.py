"""
Skill aggregator: maps round STAR scores onto five fixed skill dimensions.
"""
from typing import List, Sequence

from app.core.rounding import round_half_up, round_int
from app.schemas.report import SkillScore

# (key, label, multiplier); the five dimensions and multipliers are fixed
SKILL_DIMENSIONS = (
    ("communication", "의사소통", 0.86),
    ("logic", "논리성", 0.80),
    ("expertise", "전문성", 0.82),
    ("problemSolving", "문제해결력", 0.78),
    ("attitude", "태도/자신감", 0.88),
)

# Base used when answers exist but none shows any STAR component, so the
# radar chart is never empty for a weak-but-present interview
PRESENT_ANSWER_FLOOR = 40


def average_star(star_scores: Sequence[float]) -> int:
    if not star_scores:
        return 0
    return round_int(sum(star_scores) / len(star_scores))


def to_five_point(value: float) -> float:
    """Rescale 0-100 to 0-5 with one decimal."""
    clamped = max(0.0, min(100.0, float(value or 0)))
    return max(0.0, min(5.0, round_half_up(clamped / 100 * 5, 1)))


def effective_base(star_scores: Sequence[float], answer_texts: Sequence[str]) -> int:
    base = average_star(star_scores)
    has_answer = any((text or "").strip() for text in answer_texts)
    if base == 0 and has_answer:
        return PRESENT_ANSWER_FLOOR
    return base


def aggregate_skills(star_scores: Sequence[float], answer_texts: Sequence[str]) -> List[SkillScore]:
    """
    Compute the five skill scores (0.0-5.0).
    
    Args:
        star_scores: STAR score (0-100) of every round
        answer_texts: Answer text of every round, used for the floor rule
    """
    base = effective_base(star_scores, answer_texts)
    return [
        SkillScore(key=key, label=label, score=to_five_point(base * multiplier))
        for key, label, multiplier in SKILL_DIMENSIONS
    ]
