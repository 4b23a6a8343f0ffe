"""Tests for score modifiers and discretization."""

from datetime import date, datetime

import pytest

from capacitylog.modifiers import (
    capacity_score,
    category_modifier,
    day_of_week_modifier,
    discretize,
    sunday_based_weekday,
    time_of_day_modifier,
)


@pytest.mark.parametrize(
    "hour, expected",
    [
        (0, -0.2),
        (6, -0.2),
        (7, 0.1),
        (9, 0.1),
        (10, 0.0),
        (12, 0.0),
        (13, -0.15),
        (14, -0.15),
        (15, 0.0),
        (20, 0.0),
        (21, -0.1),
        (23, -0.1),
    ],
)
def test_time_of_day_modifier(hour, expected):
    assert time_of_day_modifier(hour) == pytest.approx(expected)


def test_day_of_week_modifier_uses_sunday_zero():
    assert day_of_week_modifier(0) == pytest.approx(0.05)
    assert day_of_week_modifier(1) == pytest.approx(-0.15)
    assert day_of_week_modifier(2) == 0.0
    assert day_of_week_modifier(3) == 0.0
    assert day_of_week_modifier(4) == 0.0
    assert day_of_week_modifier(5) == pytest.approx(0.1)
    assert day_of_week_modifier(6) == pytest.approx(0.05)


def test_sunday_based_weekday_translation():
    # 2024-01-01 was a Monday
    assert sunday_based_weekday(date(2024, 1, 1)) == 1
    assert sunday_based_weekday(date(2024, 1, 5)) == 5
    assert sunday_based_weekday(date(2024, 1, 6)) == 6
    assert sunday_based_weekday(date(2024, 1, 7)) == 0
    assert sunday_based_weekday(datetime(2024, 1, 8, 23, 59)) == 1


def test_category_modifier():
    assert category_modifier("sensory") == pytest.approx(-0.25)
    assert category_modifier("demand") == pytest.approx(-0.15)
    assert category_modifier("social") == pytest.approx(-0.1)
    assert category_modifier(None) == 0.0


def test_capacity_score_sums_terms():
    # Tuesday 11:00, social, recovery, small noise
    score = capacity_score(0.5, 11, 2, "social", in_crisis=False, in_recovery=True, noise=0.05)
    assert score == pytest.approx(0.5 - 0.1 + 0.2 + 0.05)

    crisis = capacity_score(0.7, 11, 2, None, in_crisis=True, in_recovery=False)
    assert crisis == pytest.approx(0.4)


def test_capacity_score_is_clamped():
    low = capacity_score(0.3, 5, 1, "sensory", in_crisis=True, in_recovery=False, noise=-0.15)
    assert low == 0.0

    high = capacity_score(0.8, 8, 5, None, in_crisis=False, in_recovery=True, noise=0.15)
    assert high == 1.0


@pytest.mark.parametrize(
    "score, expected",
    [
        (1.0, "resourced"),
        (0.61, "resourced"),
        (0.6, "stretched"),
        (0.31, "stretched"),
        (0.3, "depleted"),
        (0.0, "depleted"),
    ],
)
def test_discretize_thresholds(score, expected):
    assert discretize(score) == expected
