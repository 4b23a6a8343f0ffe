"""
Pydantic schemas for the capacity log simulator.

All data structures emitted or tracked by the simulator are defined here.

Design Philosophy:
- CapacityObservation is the only record that leaves the simulator; its
  serialized shape is what storage layers and UI consumers see
- SimulationState is immutable and replaced once per simulated day, so a
  generate() call never leaks state into another call
- Pydantic validation enforces the value domains (state enum, tag domain,
  counter exclusivity) at construction time
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Dict, List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ============================================================================
# Value Domains
# ============================================================================

CapacityState = Literal["resourced", "stretched", "depleted"]
Category = Literal["sensory", "demand", "social"]

CAPACITY_STATES: tuple[str, ...] = ("resourced", "stretched", "depleted")
CATEGORIES: tuple[str, ...] = ("sensory", "demand", "social")

BASE_CAPACITY_MIN = 0.3
BASE_CAPACITY_MAX = 0.8
INITIAL_BASE_CAPACITY = 0.6

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def new_observation_id() -> str:
    """Return a fresh opaque identifier for an observation."""

    return uuid4().hex


# ============================================================================
# Emitted Records
# ============================================================================


class CapacityObservation(BaseModel):
    """One discrete logged data point in a synthetic capacity log.

    Serialized shape (see to_record()):
    ``{"id": str, "state": str, "timestamp": int, "tags": [str], "note": str?}``

    The ``tags`` field is a list for forward compatibility with consumers that
    read multi-tag logs; the simulator attaches at most one tag.
    """

    id: str = Field(default_factory=new_observation_id, description="Opaque unique identifier")
    # Epoch milliseconds, matching what the mobile client stores. Negative
    # values are days before 1970.
    timestamp: int = Field(..., description="Observation time in epoch milliseconds")
    state: CapacityState = Field(..., description="Discretized capacity state")
    tags: List[Category] = Field(
        default_factory=list,
        max_length=1,
        description="Zero or one causal category",
    )
    note: Optional[str] = Field(None, description="Optional free-text note")

    def to_record(self) -> Dict[str, Any]:
        """Return the JSON-ready record, omitting ``note`` when absent."""

        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CapacityObservation":
        """Rebuild an observation from a serialized record."""

        return cls.model_validate(record)

    def moment(self, tz: Optional[tzinfo] = None) -> datetime:
        """Return the observation time as an aware datetime (UTC by default)."""

        moment = _EPOCH + timedelta(milliseconds=self.timestamp)
        return moment.astimezone(tz or timezone.utc)

    def local_date(self, tz: Optional[tzinfo] = None) -> str:
        """Return the ``YYYY-MM-DD`` calendar date of the observation."""

        return self.moment(tz).date().isoformat()

    @property
    def category(self) -> Optional[str]:
        return self.tags[0] if self.tags else None


# ============================================================================
# Simulation State
# ============================================================================


class SimulationState(BaseModel):
    """Latent state carried from one simulated day to the next.

    base_capacity is a slow random walk representing the person's baseline.
    crisis_counter / recovery_counter count remaining days in each latent
    mode; at most one of them is positive.
    """

    model_config = ConfigDict(frozen=True)

    base_capacity: float = Field(
        INITIAL_BASE_CAPACITY,
        ge=BASE_CAPACITY_MIN,
        le=BASE_CAPACITY_MAX,
        description="Rolling baseline capacity",
    )
    crisis_counter: int = Field(0, ge=0, description="Days remaining in crisis")
    recovery_counter: int = Field(0, ge=0, description="Days remaining in recovery")

    @model_validator(mode="after")
    def _modes_are_exclusive(self) -> "SimulationState":
        if self.crisis_counter > 0 and self.recovery_counter > 0:
            raise ValueError("crisis_counter and recovery_counter cannot both be positive")
        return self

    @property
    def in_crisis(self) -> bool:
        return self.crisis_counter > 0

    @property
    def in_recovery(self) -> bool:
        return self.recovery_counter > 0

    @property
    def is_normal(self) -> bool:
        return not (self.in_crisis or self.in_recovery)


class DayTrace(BaseModel):
    """White-box record of one simulated day.

    ``in_crisis`` / ``in_recovery`` are the modes used to score that day's
    entries; ``state`` is the state carried into the next day.
    """

    day_offset: int = Field(..., ge=0, description="Days before the anchor day")
    date: str = Field(..., description="Calendar date (YYYY-MM-DD) of the day")
    in_crisis: bool
    in_recovery: bool
    state: SimulationState
    entries: int = Field(..., ge=1, le=4, description="Observations emitted for the day")


# ============================================================================
# Analysis
# ============================================================================


class LogSummary(BaseModel):
    """Aggregate counts over a capacity log, for demo dashboards and the CLI."""

    total: int = 0
    by_state: Dict[str, int] = Field(
        default_factory=lambda: {state: 0 for state in CAPACITY_STATES}
    )
    by_tag: Dict[str, int] = Field(
        default_factory=lambda: {category: 0 for category in CATEGORIES}
    )
    untagged: int = 0
    with_notes: int = 0
    days: int = 0
    newest_timestamp: Optional[int] = None
    oldest_timestamp: Optional[int] = None

    def share(self, state: str) -> float:
        """Fraction of observations in ``state`` (0.0 for an empty log)."""

        if self.total == 0:
            return 0.0
        return self.by_state.get(state, 0) / self.total
