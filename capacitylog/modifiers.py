"""Score modifiers and discretization for capacity observations.

Each entry's continuous score is the sum of independent terms:

    base_capacity
    + time_of_day_modifier(hour)
    + day_of_week_modifier(day_of_week)
    + category_modifier(category)
    - 0.3 while in crisis
    + 0.2 while in recovery
    + noise

clamped to ``[0, 1]`` and then discretized with fixed thresholds. These are
plain functions so tests can reconstruct a score without running a walk.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

CRISIS_PENALTY = -0.3
RECOVERY_BONUS = 0.2
NOISE_SPREAD = 0.3

RESOURCED_THRESHOLD = 0.6
STRETCHED_THRESHOLD = 0.3

CATEGORY_MODIFIERS = {
    "sensory": -0.25,
    "demand": -0.15,
    "social": -0.1,
}

# Day-of-week numbering used throughout: 0 = Sunday .. 6 = Saturday.
SUNDAY = 0
MONDAY = 1
FRIDAY = 5
SATURDAY = 6


def sunday_based_weekday(day: Union[date, datetime]) -> int:
    """Return the weekday with Sunday as 0.

    ``date.weekday()`` counts from Monday = 0; shifting by one moves Sunday
    from 6 to 0 and keeps Monday at 1.
    """

    return (day.weekday() + 1) % 7


def time_of_day_modifier(hour: int) -> float:
    if hour < 7:
        return -0.2
    if 7 <= hour < 10:
        return 0.1
    if 13 <= hour < 15:
        return -0.15
    if hour >= 21:
        return -0.1
    return 0.0


def day_of_week_modifier(day_of_week: int) -> float:
    """Weekly rhythm keyed on Sunday-based weekday numbers."""

    if day_of_week == MONDAY:
        return -0.15
    if day_of_week == FRIDAY:
        return 0.1
    if day_of_week in (SUNDAY, SATURDAY):
        return 0.05
    return 0.0


def category_modifier(category: Optional[str]) -> float:
    if category is None:
        return 0.0
    return CATEGORY_MODIFIERS[category]


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def capacity_score(
    base_capacity: float,
    hour: int,
    day_of_week: int,
    category: Optional[str],
    *,
    in_crisis: bool,
    in_recovery: bool,
    noise: float = 0.0,
) -> float:
    """Combine all modifiers into a continuous score clamped to ``[0, 1]``."""

    score = base_capacity
    score += time_of_day_modifier(hour)
    score += day_of_week_modifier(day_of_week)
    score += category_modifier(category)
    if in_crisis:
        score += CRISIS_PENALTY
    if in_recovery:
        score += RECOVERY_BONUS
    score += noise
    return clamp(score, 0.0, 1.0)


def discretize(score: float) -> str:
    """Map a ``[0, 1]`` score onto ``resourced`` / ``stretched`` / ``depleted``."""

    if score > RESOURCED_THRESHOLD:
        return "resourced"
    if score > STRETCHED_THRESHOLD:
        return "stretched"
    return "depleted"
