"""
Speech delivery metrics for interview answers.

All functions are total: missing or zero durations yield 0, never a division
error or NaN.
"""
import re
from typing import Sequence

from app.core.rounding import round_half_up, round_int
from app.schemas.report import SpeechSummary
from app.services.round_segmenter import Round

# Korean hesitation tokens, longest first so that '그러니까' is counted once
FILLERS = ["그러니까", "뭐라", "약간", "음..", "어..", "음", "어", "그"]
FILLER_PATTERN = re.compile("|".join(re.escape(f) for f in FILLERS))


def word_count(text: str) -> int:
    return len((text or "").split())


def filler_count(text: str) -> int:
    return len(FILLER_PATTERN.findall(text or ""))


def words_per_minute(text: str, duration_sec: float) -> int:
    """Words per minute over duration_sec; 0 when the duration is unknown."""
    if not duration_sec or duration_sec <= 0:
        return 0
    return round_int(word_count(text) / duration_sec * 60)


def filler_per_minute(text: str, duration_sec: float) -> float:
    """Filler tokens per minute, 2 decimals; 0 when the duration is unknown."""
    minutes = (duration_sec or 0) / 60
    if minutes <= 0:
        return 0.0
    return round_half_up(filler_count(text) / minutes, 2)


def session_speech(rounds: Sequence[Round]) -> SpeechSummary:
    """Aggregate delivery metrics over all rounds."""
    user_sec = 0.0
    total_sec = 0.0
    words = 0
    fillers = 0
    longest_pause = 0.0

    for record in rounds:
        user_sec += record.answer_duration_sec
        total_sec += record.answer_duration_sec + record.question_duration_sec
        words += word_count(record.answer_text)
        fillers += filler_count(record.answer_text)
        longest_pause = max(longest_pause, record.max_silence_sec)

    minutes = user_sec / 60
    return SpeechSummary(
        talk_listen_ratio=round_half_up(user_sec / total_sec, 2) if total_sec else 0.0,
        avg_wpm=round_int(words / minutes) if minutes else 0,
        wpm_std=0.0,
        filler_per_min=round_half_up(fillers / minutes, 2) if minutes else 0.0,
        longest_pause_sec=longest_pause,
        hedging_pct=0.0,
    )
