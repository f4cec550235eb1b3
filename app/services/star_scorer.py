"""
STAR completeness scoring (Situation / Task / Action / Result).

Cue words are tuned for Korean answers. Each component is all-or-nothing and
worth 25 points.
"""
import re
from typing import Tuple

from app.schemas.report import StarComponents

SITUATION_CUES = ("상황", "배경")
TASK_CUES = ("과제", "문제")
ACTION_CUES = ("행동", "어떻게")
RESULT_CUES = ("결과", "성과")

# "30%", "12건": a quantified outcome counts as a result on its own
QUANTIFIED_RESULT = re.compile(r"\d+\s?%|\d+\s?건")

POINTS_PER_COMPONENT = 25


def _has_any(text: str, cues) -> bool:
    return any(cue in text for cue in cues)


def detect_star(text: str) -> StarComponents:
    text = text or ""
    return StarComponents(
        S=_has_any(text, SITUATION_CUES),
        T=_has_any(text, TASK_CUES),
        A=_has_any(text, ACTION_CUES),
        R=_has_any(text, RESULT_CUES) or bool(QUANTIFIED_RESULT.search(text)),
    )


def star_score(text: str) -> Tuple[StarComponents, int]:
    """
    Score an answer's STAR structure.

    Returns:
        (components, score) where score is one of 0, 25, 50, 75, 100
    """
    components = detect_star(text)
    hits = sum([components.S, components.T, components.A, components.R])
    return components, hits * POINTS_PER_COMPONENT


STAR_FEEDBACK = {
    "S": ("상황/배경을 먼저 제시함", "상황/배경 설명이 부족함"),
    "T": ("해결할 과제를 명확히 정의함", "과제/문제 정의가 드러나지 않음"),
    "A": ("본인의 행동을 구체적으로 설명함", "본인이 어떻게 행동했는지 불분명함"),
    "R": ("결과/성과를 제시함", "결과나 수치 성과가 없음"),
}


def star_feedback(components: StarComponents) -> Tuple[list, list]:
    """Rule-based pros/cons for a round card."""
    pros, cons = [], []
    for key, (pro, con) in STAR_FEEDBACK.items():
        if getattr(components, key):
            pros.append(pro)
        else:
            cons.append(con)
    return pros, cons
