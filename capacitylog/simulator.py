"""
Capacity series simulator.

Walks forward one simulated day at a time across a multi-year span and emits
synthetic capacity observations with realistic shape: a daily rhythm, a
weekly rhythm, occasional multi-day crises followed by recovery, and noisy
but bounded values.

Key responsibilities:
- Carry the latent SimulationState (base capacity walk, crisis/recovery
  counters) from day to day
- Decide how many entries each day gets and where they fall in the day
- Score each entry from independent modifiers and discretize it
- Attach an optional category tag and note
- Return every observation sorted newest first

Design principle: all randomness flows through one injected RandomSource.
A source that always returns the same value makes the walk fully
deterministic, which is how the tests pin exact outputs.

Usage:
    observations = generate(4)                         # unseeded
    observations = generate(1, rng=random.Random(7))   # reproducible
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, List, Optional, Tuple

from .errors import InvalidArgument
from .logging_utils import EMOJI_DETERMINISTIC, EMOJI_SUCCESS, log_deterministic, log_success
from .modifiers import NOISE_SPREAD, capacity_score, clamp, discretize, sunday_based_weekday
from .notes import DEFAULT_NOTE_POOL, NotePool
from .random_source import RandomSource, centered, default_source, pick, randint_span
from .schemas import (
    BASE_CAPACITY_MAX,
    BASE_CAPACITY_MIN,
    CapacityObservation,
    DayTrace,
    SimulationState,
    new_observation_id,
)

DAYS_PER_YEAR = 365
DEFAULT_YEARS = 4

BASE_DRIFT_SPREAD = 0.02
CRISIS_CHANCE = 0.02
CRISIS_MIN_DAYS = 3
CRISIS_DAY_CHOICES = 7  # 3..9 days
RECOVERY_CHANCE = 0.7
RECOVERY_MIN_DAYS = 3
RECOVERY_DAY_CHOICES = 5  # 3..7 days

CATEGORY_CHANCE = 0.6
NOTE_CHANCE = 0.4
CATEGORY_NOTE_CHANCE = 0.7

# Cumulative thresholds; the first category whose bound exceeds the draw wins.
CRISIS_CATEGORY_THRESHOLDS: Tuple[Tuple[str, float], ...] = (
    ("sensory", 0.4),
    ("demand", 0.75),
    ("social", 1.0),
)
NORMAL_CATEGORY_THRESHOLDS: Tuple[Tuple[str, float], ...] = (
    ("sensory", 0.33),
    ("demand", 0.66),
    ("social", 1.0),
)

# (first hour, number of hours) per entry slot; slots past the last reuse it.
HOUR_WINDOWS: Tuple[Tuple[int, int], ...] = (
    (7, 3),   # morning 7-9
    (12, 3),  # midday 12-14
    (17, 3),  # evening 17-19
    (20, 3),  # night 20-22
)

MS_PER_SECOND = 1000


@dataclass(frozen=True)
class DayStep:
    """Outcome of the latent-mode transition for one day."""

    state: SimulationState
    in_crisis: bool
    in_recovery: bool


@dataclass(frozen=True)
class ScoredEntry:
    """An emitted observation together with the continuous score behind it."""

    observation: CapacityObservation
    score: float
    hour: int
    day_of_week: int


def validate_years(years: object) -> int:
    """Return ``years`` if it is a positive integer, else raise InvalidArgument."""

    if isinstance(years, bool) or not isinstance(years, int):
        raise InvalidArgument(f"years must be a positive integer, got {years!r}")
    if years <= 0:
        raise InvalidArgument(f"years must be a positive integer, got {years}")
    return years


def _normalize_anchor(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _to_epoch_ms(moment: datetime) -> int:
    return int(round(moment.timestamp())) * MS_PER_SECOND


class CapacitySimulator:
    """Stochastic generator of synthetic capacity logs.

    A simulator owns its random source, so share one instance only within a
    single thread. Each generate() call starts from a fresh SimulationState;
    nothing carries over between calls except the position of the random
    source.

    Args:
        rng: Source of uniform floats in ``[0, 1)``. Defaults to a fresh
            unseeded ``random.Random``.
        note_pool: Note wording tables.
        id_factory: Produces observation ids. Never consumes ``rng``.
        initial_state: State on the first simulated day.
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        *,
        note_pool: NotePool = DEFAULT_NOTE_POOL,
        id_factory: Callable[[], str] = new_observation_id,
        initial_state: Optional[SimulationState] = None,
    ) -> None:
        self.rng: RandomSource = rng if rng is not None else default_source()
        self.note_pool = note_pool
        self.id_factory = id_factory
        self.initial_state = initial_state or SimulationState()

    # ------------------------------------------------------------------
    # Day-level state walk
    # ------------------------------------------------------------------

    def advance_day(self, state: SimulationState) -> DayStep:
        """Drift the baseline and step the crisis/recovery cycle by one day.

        The returned flags are the modes used to score today's entries. The
        returned state is what tomorrow starts from. A recovery scheduled on
        the last crisis day only begins once that day is over.
        """

        rng = self.rng
        base = clamp(
            state.base_capacity + centered(rng, BASE_DRIFT_SPREAD),
            BASE_CAPACITY_MIN,
            BASE_CAPACITY_MAX,
        )

        crisis = state.crisis_counter
        recovery = state.recovery_counter
        scheduled_recovery = 0

        if crisis == 0 and recovery == 0 and rng.random() < CRISIS_CHANCE:
            crisis = randint_span(rng, CRISIS_MIN_DAYS, CRISIS_DAY_CHOICES)

        if crisis == 1 and rng.random() < RECOVERY_CHANCE:
            scheduled_recovery = randint_span(rng, RECOVERY_MIN_DAYS, RECOVERY_DAY_CHOICES)

        in_crisis = crisis > 0
        in_recovery = recovery > 0

        if crisis > 0:
            crisis -= 1
        if recovery > 0:
            recovery -= 1
        if scheduled_recovery:
            recovery = scheduled_recovery

        next_state = SimulationState(
            base_capacity=base,
            crisis_counter=crisis,
            recovery_counter=recovery,
        )
        return DayStep(state=next_state, in_crisis=in_crisis, in_recovery=in_recovery)

    def entries_for_day(self, in_crisis: bool) -> int:
        """Baseline of 2 entries (3 in crisis) adjusted by -1, 0 or +1."""

        baseline = 3 if in_crisis else 2
        return baseline + randint_span(self.rng, -1, 3)

    # ------------------------------------------------------------------
    # Entry synthesis
    # ------------------------------------------------------------------

    def entry_hour(self, entry_index: int) -> int:
        first_hour, span = HOUR_WINDOWS[min(entry_index, len(HOUR_WINDOWS) - 1)]
        return randint_span(self.rng, first_hour, span)

    def pick_category(self, in_crisis: bool) -> Optional[str]:
        if self.rng.random() >= CATEGORY_CHANCE:
            return None

        thresholds = CRISIS_CATEGORY_THRESHOLDS if in_crisis else NORMAL_CATEGORY_THRESHOLDS
        draw = self.rng.random()
        for category, bound in thresholds:
            if draw < bound:
                return category
        return thresholds[-1][0]

    def pick_note(self, category: Optional[str]) -> Optional[str]:
        if self.rng.random() >= NOTE_CHANCE:
            return None

        prefer_category = category is not None and self.rng.random() < CATEGORY_NOTE_CHANCE
        pool = self.note_pool.pool_for(category, prefer_category=prefer_category)
        return pick(self.rng, pool)

    def synthesize_entry(
        self,
        entry_index: int,
        day_start: datetime,
        step: DayStep,
    ) -> ScoredEntry:
        """Build one observation for the day starting at ``day_start``."""

        hour = self.entry_hour(entry_index)
        minute = randint_span(self.rng, 0, 60)
        moment = day_start.replace(hour=hour, minute=minute)
        day_of_week = sunday_based_weekday(day_start)

        category = self.pick_category(step.in_crisis)
        score = capacity_score(
            step.state.base_capacity,
            hour,
            day_of_week,
            category,
            in_crisis=step.in_crisis,
            in_recovery=step.in_recovery,
            noise=centered(self.rng, NOISE_SPREAD),
        )
        note = self.pick_note(category)

        observation = CapacityObservation(
            id=self.id_factory(),
            timestamp=_to_epoch_ms(moment),
            state=discretize(score),
            tags=[category] if category else [],
            note=note,
        )
        return ScoredEntry(observation=observation, score=score, hour=hour, day_of_week=day_of_week)

    def simulate_day(
        self,
        state: SimulationState,
        day_start: datetime,
    ) -> Tuple[DayStep, List[ScoredEntry]]:
        step = self.advance_day(state)
        count = self.entries_for_day(step.in_crisis)
        entries = [self.synthesize_entry(index, day_start, step) for index in range(count)]
        return step, entries

    # ------------------------------------------------------------------
    # Full walk
    # ------------------------------------------------------------------

    def generate(
        self,
        years: int = DEFAULT_YEARS,
        *,
        now: Optional[datetime] = None,
        trace: Optional[List[DayTrace]] = None,
        verbose: bool = False,
    ) -> List[CapacityObservation]:
        """Generate ``years`` of observations, newest first.

        Walks ``years * 365 + 1`` days, from ``years * 365`` days before the
        anchor day up to and including the anchor day itself.

        Args:
            years: Positive span length in years.
            now: Anchor moment; defaults to the current UTC time. Naive
                datetimes are read as UTC.
            trace: Optional list that receives one DayTrace per day.
            verbose: Print progress markers.

        Raises:
            InvalidArgument: If ``years`` is not a positive integer, or if the
                span would start before ``date.min``.
        """

        validate_years(years)
        anchor = _normalize_anchor(now)
        total_days = years * DAYS_PER_YEAR
        anchor_date = anchor.date()
        # Keep one spare day above date.min so timezone offsets cannot underflow.
        if total_days >= (anchor_date - date.min).days:
            raise InvalidArgument(
                f"years={years} reaches before {date.min.isoformat()} from anchor {anchor_date}"
            )

        if verbose:
            log_deterministic(
                f"{EMOJI_DETERMINISTIC} Generating {total_days + 1} days of capacity data"
            )

        state = self.initial_state
        observations: List[CapacityObservation] = []

        for offset in range(total_days, -1, -1):
            day: date = anchor_date - timedelta(days=offset)
            day_start = datetime.combine(day, time(0, 0), tzinfo=anchor.tzinfo)
            step, entries = self.simulate_day(state, day_start)
            state = step.state
            observations.extend(entry.observation for entry in entries)

            if trace is not None:
                trace.append(
                    DayTrace(
                        day_offset=offset,
                        date=day.isoformat(),
                        in_crisis=step.in_crisis,
                        in_recovery=step.in_recovery,
                        state=step.state,
                        entries=len(entries),
                    )
                )

        # list.sort is stable, so equal timestamps keep generation order.
        observations.sort(key=lambda observation: observation.timestamp, reverse=True)

        if verbose:
            log_success(f"{EMOJI_SUCCESS} Generated {len(observations)} observations")
        return observations


def generate(
    years: int = DEFAULT_YEARS,
    *,
    rng: Optional[RandomSource] = None,
    now: Optional[datetime] = None,
    note_pool: NotePool = DEFAULT_NOTE_POOL,
    id_factory: Callable[[], str] = new_observation_id,
    trace: Optional[List[DayTrace]] = None,
    verbose: bool = False,
) -> List[CapacityObservation]:
    """Generate a synthetic capacity log sorted by timestamp descending.

    Convenience wrapper that builds a throwaway CapacitySimulator, so
    concurrent callers never share simulation state. Pass a seeded ``rng``
    (e.g. ``random.Random(42)``) for reproducible output; ids are drawn from
    ``id_factory`` and differ between runs unless it is also fixed.

    Raises:
        InvalidArgument: If ``years`` is not a positive integer. Checked
            before a simulator is built.
    """

    validate_years(years)
    simulator = CapacitySimulator(rng, note_pool=note_pool, id_factory=id_factory)
    return simulator.generate(years, now=now, trace=trace, verbose=verbose)
