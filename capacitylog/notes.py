"""Flavor-text note pools.

The pools are constant tables. The simulator reaches them only through a
NotePool, so a scenario can swap wording without touching the probabilities
that decide when a note appears and which pool it comes from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple

from .schemas import CATEGORIES

SENSORY_NOTES: Tuple[str, ...] = (
    "Loud construction outside",
    "Crowded grocery store",
    "Bright fluorescent lights",
    "Noisy restaurant",
    "Strong perfume in elevator",
    "Scratchy clothing tag",
    "Too many notifications",
    "Loud music from neighbors",
    "Overwhelming mall visit",
    "Sirens outside window",
)

DEMAND_NOTES: Tuple[str, ...] = (
    "Back-to-back meetings",
    "Deadline pressure",
    "Complex problem solving",
    "Learning new system",
    "Too many tasks",
    "Decision fatigue",
    "Unexpected urgent request",
    "Documentation marathon",
    "Budget planning",
    "Performance review prep",
)

SOCIAL_NOTES: Tuple[str, ...] = (
    "Family dinner",
    "Networking event",
    "Video calls all day",
    "Unexpected visitors",
    "Group project meeting",
    "Birthday party",
    "Difficult conversation",
    "Small talk exhaustion",
    "Crowded social event",
    "Phone call marathon",
)

GENERAL_NOTES: Tuple[str, ...] = (
    "Didn't sleep well",
    "Skipped breakfast",
    "Forgot medication",
    "Good rest last night",
    "Morning meditation helped",
    "Exercise this morning",
    "Quiet day at home",
    "Took a nap",
    "Went for a walk",
    "Early bedtime",
)


def _default_category_notes() -> Dict[str, Tuple[str, ...]]:
    return {
        "sensory": SENSORY_NOTES,
        "demand": DEMAND_NOTES,
        "social": SOCIAL_NOTES,
    }


@dataclass(frozen=True)
class NotePool:
    """Lookup table of note wording per category plus a general pool."""

    by_category: Dict[str, Tuple[str, ...]] = field(default_factory=_default_category_notes)
    general_notes: Tuple[str, ...] = GENERAL_NOTES

    def __post_init__(self) -> None:
        missing = [category for category in CATEGORIES if not self.by_category.get(category)]
        if missing:
            raise ValueError(f"note pool has no entries for: {', '.join(missing)}")
        if not self.general_notes:
            raise ValueError("general note pool cannot be empty")

    def for_category(self, category: str) -> Sequence[str]:
        return self.by_category[category]

    def general(self) -> Sequence[str]:
        return self.general_notes

    def pool_for(self, category: Optional[str], *, prefer_category: bool) -> Sequence[str]:
        """Return the category pool when one applies and is preferred."""

        if category is not None and prefer_category:
            return self.for_category(category)
        return self.general()


DEFAULT_NOTE_POOL = NotePool()
