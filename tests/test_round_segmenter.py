"""
Unit tests for round segmentation.
"""
from datetime import datetime, timedelta

import pytest

from app.services.round_segmenter import has_structured_rounds, segment_rounds, sort_by_arrival


def _indices(rounds):
    return [r.index for r in rounds]


def test_empty_stream_yields_no_rounds():
    assert segment_rounds(events=[]) == []
    assert segment_rounds() == []


def test_bot_event_opens_round_and_user_joins_it():
    events = [
        {"role": "interviewer", "text": "자기소개 부탁드립니다"},
        {"role": "candidate", "text": "저는 백엔드 개발자입니다"},
        {"role": "candidate", "text": "5년차입니다"},
        {"role": "interviewer", "text": "가장 어려웠던 프로젝트는?"},
        {"role": "candidate", "text": "결제 시스템 이전입니다"},
    ]
    rounds = segment_rounds(events=events)

    assert _indices(rounds) == [1, 2]
    assert rounds[0].question_text == "자기소개 부탁드립니다"
    assert rounds[0].answer_text == "저는 백엔드 개발자입니다\n5년차입니다"
    assert rounds[1].answer_text == "결제 시스템 이전입니다"


def test_user_before_any_bot_goes_to_round_one():
    rounds = segment_rounds(events=[{"role": "user", "text": "먼저 말씀드리면"}])
    assert len(rounds) == 1
    assert rounds[0].index == 1
    assert rounds[0].answer_text == "먼저 말씀드리면"


def test_explicit_round_numbers_are_authoritative_and_renumbered():
    events = [
        {"role": "interviewer", "round": 3, "text": "Q3"},
        {"role": "candidate", "round": 3, "text": "A3"},
        {"role": "interviewer", "round": 1, "text": "Q1"},
        {"role": "candidate", "turn": 1, "text": "A1"},
    ]
    rounds = segment_rounds(events=events)

    assert _indices(rounds) == [1, 2]
    assert (rounds[0].question_text, rounds[0].answer_text) == ("Q1", "A1")
    assert (rounds[1].question_text, rounds[1].answer_text) == ("Q3", "A3")


def test_multiple_bot_texts_in_one_round_are_newline_joined():
    events = [
        {"role": "bot", "round": 1, "text": "반갑습니다."},
        {"role": "bot", "round": 1, "text": "지원 동기가 무엇인가요?"},
    ]
    rounds = segment_rounds(events=events)
    assert rounds[0].question_text == "반갑습니다.\n지원 동기가 무엇인가요?"


def test_unknown_role_continues_last_speaker():
    events = [
        {"role": "interviewer", "text": "질문"},
        {"role": "candidate", "text": "답변 시작"},
        {"type": "transcript", "payload": {"delta": {"text": "이어지는 답변"}}},
    ]
    rounds = segment_rounds(events=events)
    assert len(rounds) == 1
    assert rounds[0].answer_text == "답변 시작\n이어지는 답변"


def test_unknown_role_without_context_is_dropped():
    events = [
        {"text": "누가 말했는지 모름"},
        {"role": "interviewer", "text": "질문"},
    ]
    rounds = segment_rounds(events=events)
    assert len(rounds) == 1
    assert rounds[0].question_text == "질문"
    assert rounds[0].answer_text == ""


def test_interviewer_tag_and_type_from_bot_event():
    events = [
        {"role": "interviewer", "interviewer": "B", "type": "behavioral", "text": "Q"},
        {"role": "candidate", "text": "A"},
    ]
    rounds = segment_rounds(events=events)
    assert rounds[0].interviewer_tag == "B"
    assert rounds[0].type == "behavioral"


def test_events_sorted_by_arrival():
    t0 = datetime(2026, 10, 1, 9, 0, 0)
    events = [
        {"role": "candidate", "text": "A1", "createdAt": t0 + timedelta(seconds=5)},
        {"role": "interviewer", "text": "Q1", "createdAt": t0},
    ]
    rounds = segment_rounds(events=events)
    assert rounds[0].question_text == "Q1"
    assert rounds[0].answer_text == "A1"


def test_sort_by_arrival_keeps_untimed_events_next_to_neighbour():
    events = [
        {"id": 1, "ts": 10},
        {"id": 2},
        {"id": 3, "ts": 5},
    ]
    assert [e["id"] for e in sort_by_arrival(events)] == [3, 1, 2]


def test_event_durations_accumulate():
    events = [
        {"role": "interviewer", "text": "Q", "durationSec": 10},
        {"role": "candidate", "text": "A", "durationSec": 30},
        {"role": "candidate", "text": "B", "durationSec": 15},
    ]
    rounds = segment_rounds(events=events)
    assert rounds[0].question_duration_sec == 10
    assert rounds[0].answer_duration_sec == 45


def test_structured_rounds_take_precedence():
    structured = [
        {"idx": 2, "type": "tech", "question": {"text": "Q2"},
         "answer": {"text": "A2", "durationSec": 30, "maxSilenceSec": 2.5, "score": 70}},
        {"idx": 1, "question": "Q1", "answer": {"text": "A1"}},
    ]
    events = [{"role": "interviewer", "text": "ignored"}]
    rounds = segment_rounds(events=events, structured_rounds=structured)

    assert _indices(rounds) == [1, 2]
    assert rounds[0].question_text == "Q1"
    assert rounds[1].answer_text == "A2"
    assert rounds[1].answer_duration_sec == 30
    assert rounds[1].max_silence_sec == 2.5
    assert rounds[1].score == 70
    assert rounds[1].type == "tech"


def test_structured_rounds_ignore_bad_values():
    structured = [{"question": "Q", "answer": {"text": "A", "durationSec": "abc", "score": 400}}]
    rounds = segment_rounds(structured_rounds=structured)
    assert rounds[0].answer_duration_sec == 0
    assert rounds[0].score is None


@pytest.mark.parametrize("structured", [{"note": "interview aborted"}, ["garbage"], [], None])
def test_unusable_structured_rounds_fall_back_to_events(structured):
    events = [
        {"role": "interviewer", "text": "Q"},
        {"role": "candidate", "text": "A"},
    ]
    rounds = segment_rounds(events=events, structured_rounds=structured)
    assert len(rounds) == 1
    assert (rounds[0].question_text, rounds[0].answer_text) == ("Q", "A")


def test_has_structured_rounds():
    assert has_structured_rounds([{"question": "Q"}])
    assert has_structured_rounds(["garbage", {"answer": "A"}])
    assert not has_structured_rounds(["garbage"])
    assert not has_structured_rounds({"question": "Q"})
    assert not has_structured_rounds(None)


def test_unknown_role_with_round_number_and_no_speaker_adds_no_round():
    events = [
        {"round": 2, "text": "배경 소음"},
        {"role": "interviewer", "round": 1, "text": "Q1"},
        {"role": "candidate", "round": 1, "text": "A1"},
    ]
    rounds = segment_rounds(events=events)
    assert len(rounds) == 1
    assert rounds[0].question_text == "Q1"


def test_indices_always_contiguous_from_one():
    streams = [
        [{"role": "bot", "round": 7}, {"role": "user", "round": 2}, {"role": "bot", "round": 40}],
        [{"role": "bot"}, {"role": "bot"}, {"role": "user"}, {"role": "bot"}],
        [{"role": "user", "turn": 5}, {"role": "bot"}, {"role": "narrator"}],
    ]
    for events in streams:
        rounds = segment_rounds(events=events)
        assert _indices(rounds) == list(range(1, len(rounds) + 1))
