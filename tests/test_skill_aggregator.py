"""
Unit tests for skill aggregation.
"""
from app.services.skill_aggregator import (
    SKILL_DIMENSIONS,
    aggregate_skills,
    average_star,
    to_five_point,
)


def _scores(skills):
    return {s.key: s.score for s in skills}


def test_five_fixed_dimensions_in_order():
    skills = aggregate_skills([50], ["답변"])
    assert [s.key for s in skills] == ["communication", "logic", "expertise", "problemSolving", "attitude"]
    assert [s.label for s in skills] == [label for _, label, _ in SKILL_DIMENSIONS]


def test_no_answers_all_zero():
    assert all(score == 0.0 for score in _scores(aggregate_skills([], [])).values())
    assert all(score == 0.0 for score in _scores(aggregate_skills([0, 0], ["", "  "])).values())


def test_floor_applies_when_answers_exist_without_star():
    scores = _scores(aggregate_skills([0], ["음 그냥요"]))

    assert scores["communication"] == 1.7
    assert scores["logic"] == 1.6
    assert scores["expertise"] == 1.6
    assert scores["problemSolving"] == 1.6
    assert scores["attitude"] == 1.8


def test_full_star_scores():
    scores = _scores(aggregate_skills([100, 100], ["a", "b"]))

    assert scores["communication"] == 4.3
    assert scores["logic"] == 4.0
    assert scores["expertise"] == 4.1
    assert scores["problemSolving"] == 3.9
    assert scores["attitude"] == 4.4


def test_nonzero_average_skips_floor():
    skills = aggregate_skills([50, 0], ["상황 설명", "결과"])
    expected = [to_five_point(25 * multiplier) for _, _, multiplier in SKILL_DIMENSIONS]
    assert [s.score for s in skills] == expected


def test_scores_stay_in_range():
    for star in ([0], [25], [75], [100]):
        for skill in aggregate_skills(star, ["x"]):
            assert 0.0 <= skill.score <= 5.0


def test_average_star_rounds_half_up():
    assert average_star([25, 50]) == 38
    assert average_star([]) == 0


def test_to_five_point_clamps():
    assert to_five_point(150) == 5.0
    assert to_five_point(-10) == 0.0
