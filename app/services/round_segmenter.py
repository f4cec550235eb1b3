"""
Round segmenter.

Turns a session into ordered question/answer rounds, either from the
pre-structured rounds stored on the session or by grouping raw events.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from app.services.text_extractor import (
    ROLE_BOT,
    ROLE_USER,
    extract_text,
    resolve_role,
)

logger = logging.getLogger(__name__)

ROUND_NUMBER_FIELDS = ("round", "turn")
INTERVIEWER_FIELDS = ("interviewer", "interviewerRole", "agent")
TIMESTAMP_FIELDS = ("createdAt", "created_at", "timestamp", "ts")
DURATION_FIELDS = ("durationSec", "duration_sec")


@dataclass
class Round:
    """One question/answer exchange."""
    index: int
    type: str = ""
    interviewer_tag: str = ""
    question_text: str = ""
    answer_text: str = ""
    question_duration_sec: float = 0.0
    answer_duration_sec: float = 0.0
    max_silence_sec: float = 0.0
    score: Optional[float] = None


def segment_rounds(
    events: Optional[Sequence[Mapping[str, Any]]] = None,
    structured_rounds: Optional[Sequence[Any]] = None,
) -> List[Round]:
    """
    Build rounds for a session.

    Pre-structured rounds are authoritative when they hold at least one
    question/answer mapping; otherwise events are grouped. Output indices are
    always 1..n in ascending order.
    """
    rounds = rounds_from_structured(structured_rounds) if has_structured_rounds(structured_rounds) else []
    if not rounds:
        rounds = rounds_from_events(events or [])
    return _renumber(rounds)


def has_structured_rounds(value: Any) -> bool:
    """True when value is a list holding at least one per-round mapping."""
    return isinstance(value, (list, tuple)) and any(isinstance(item, Mapping) for item in value)


def rounds_from_structured(structured_rounds: Sequence[Any]) -> List[Round]:
    rounds = []
    for position, item in enumerate(structured_rounds, start=1):
        if not isinstance(item, Mapping):
            continue
        question = item.get("question")
        answer = item.get("answer")
        question_map = question if isinstance(question, Mapping) else {}
        answer_map = answer if isinstance(answer, Mapping) else {}

        rounds.append(Round(
            index=_as_int(item.get("idx")) or _as_int(item.get("round")) or position,
            type=str(item.get("type") or ""),
            interviewer_tag=str(item.get("interviewer") or ""),
            question_text=extract_text(question),
            answer_text=extract_text(answer),
            question_duration_sec=_as_float(question_map.get("durationSec")),
            answer_duration_sec=_as_float(answer_map.get("durationSec")),
            max_silence_sec=_as_float(answer_map.get("maxSilenceSec")),
            score=_score_or_none(answer_map.get("score")),
        ))
    rounds.sort(key=lambda r: r.index)
    return rounds


def rounds_from_events(events: Sequence[Mapping[str, Any]]) -> List[Round]:
    """
    Group free-form events into rounds.

    An explicit round/turn number on the event is authoritative. Otherwise a
    bot event opens a new round and a user event joins the current one (round
    1 if none is open). Unknown-role events are dropped until someone has
    spoken; after that their text continues whichever side spoke last.
    """
    by_round: Dict[int, Round] = {}
    current: Optional[int] = None
    last_side: Optional[str] = None

    for event in sort_by_arrival(events):
        role = resolve_role(event)
        number = _explicit_round_number(event)

        if number is None:
            if role == ROLE_BOT:
                number = max(by_round, default=0) + 1
            elif role == ROLE_USER:
                number = current if current is not None else 1
            else:
                number = current

        side = role if role in (ROLE_BOT, ROLE_USER) else last_side
        if number is None or side is None:
            continue

        record = by_round.get(number)
        if record is None:
            record = Round(index=number, type=str(event.get("type") or ""))
            by_round[number] = record
        current = number

        text = extract_text(event)
        duration = _event_duration(event)
        if side == ROLE_BOT:
            record.question_text = _join(record.question_text, text)
            record.question_duration_sec += duration
            if not record.interviewer_tag:
                record.interviewer_tag = _interviewer_tag(event)
            if not record.type and event.get("type"):
                record.type = str(event.get("type"))
        else:
            record.answer_text = _join(record.answer_text, text)
            record.answer_duration_sec += duration
        last_side = side

    return [by_round[key] for key in sorted(by_round)]


def sort_by_arrival(events: Sequence[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    """
    Stable sort by timestamp.

    Events without a usable timestamp inherit the previous event's, so they
    stay next to their neighbours.
    """
    keyed = []
    previous = float("-inf")
    for position, event in enumerate(events):
        if not isinstance(event, Mapping):
            continue
        stamp = _timestamp(event)
        if stamp is None:
            stamp = previous
        previous = stamp
        keyed.append((stamp, position, event))
    keyed.sort(key=lambda item: (item[0], item[1]))
    return [event for _, _, event in keyed]


def _renumber(rounds: List[Round]) -> List[Round]:
    for position, record in enumerate(rounds, start=1):
        record.index = position
    return rounds


def _join(existing: str, text: str) -> str:
    if not text:
        return existing
    return f"{existing}\n{text}" if existing else text


def _explicit_round_number(event: Mapping[str, Any]) -> Optional[int]:
    for field in ROUND_NUMBER_FIELDS:
        number = _as_int(event.get(field))
        if number is not None:
            return number
    return None


def _interviewer_tag(event: Mapping[str, Any]) -> str:
    for field in INTERVIEWER_FIELDS + ("speaker",):
        value = event.get(field)
        if value:
            return str(value)
    return ""


def _event_duration(event: Mapping[str, Any]) -> float:
    for field in DURATION_FIELDS:
        if field in event:
            return _as_float(event.get(field))
    return 0.0


def _timestamp(event: Mapping[str, Any]) -> Optional[float]:
    for field in TIMESTAMP_FIELDS:
        value = event.get(field)
        if value is None:
            continue
        if isinstance(value, datetime):
            return value.timestamp()
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()
            except ValueError:
                continue
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _as_float(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number or number in (float("inf"), float("-inf")) or number < 0:
        return 0.0
    return number


def _score_or_none(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value != value or not 0 <= value <= 100:
        return None
    return float(value)
