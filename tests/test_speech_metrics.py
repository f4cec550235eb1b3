"""
Unit tests for speech delivery metrics.
"""
from app.services.round_segmenter import Round
from app.services.speech_metrics import (
    filler_count,
    filler_per_minute,
    session_speech,
    word_count,
    words_per_minute,
)


def test_zero_duration_yields_zero_not_error():
    assert words_per_minute("하나 둘 셋", 0) == 0
    assert words_per_minute("하나 둘 셋", None) == 0
    assert filler_per_minute("음 어 음", 0) == 0.0


def test_words_per_minute():
    assert words_per_minute("one two three four", 120) == 2
    assert words_per_minute("", 60) == 0


def test_word_count_splits_on_whitespace():
    assert word_count("  저는   개발자\n입니다 ") == 3
    assert word_count(None) == 0


def test_longest_filler_counted_once():
    assert filler_count("음 그러니까 음") == 3
    assert filler_per_minute("음 그러니까 음", 60) == 3.0


def test_no_fillers():
    assert filler_per_minute("백엔드 시스템 설계", 60) == 0.0


def test_session_speech_aggregates_rounds():
    rounds = [
        Round(index=1, answer_text="하나 둘 셋", answer_duration_sec=60,
              question_duration_sec=20, max_silence_sec=2.5),
        Round(index=2, answer_text="넷 음", answer_duration_sec=30,
              question_duration_sec=10, max_silence_sec=4.0),
    ]
    speech = session_speech(rounds)

    assert speech.talk_listen_ratio == 0.75
    assert speech.avg_wpm == 3
    assert speech.filler_per_min == 0.67
    assert speech.longest_pause_sec == 4.0


def test_session_speech_without_durations_is_all_zero():
    speech = session_speech([Round(index=1, answer_text="답변만 있음")])
    assert speech.talk_listen_ratio == 0.0
    assert speech.avg_wpm == 0
    assert speech.filler_per_min == 0.0
    assert session_speech([]).avg_wpm == 0
