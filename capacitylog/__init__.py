"""
capacitylog - synthetic capacity log generator.

Produces multi-year capacity observation series (resourced / stretched /
depleted) with daily and weekly rhythm and a latent crisis/recovery cycle,
for seeding demo and test datasets.

No file I/O required. No global config. The random source is injected.
"""

__version__ = "0.1.0"

# Main simulation components
from .simulator import CapacitySimulator, DayStep, ScoredEntry, generate, validate_years

# Core schemas
from .schemas import (
    CAPACITY_STATES,
    CATEGORIES,
    CapacityObservation,
    DayTrace,
    LogSummary,
    SimulationState,
)

# Building blocks
from .modifiers import (
    capacity_score,
    category_modifier,
    day_of_week_modifier,
    discretize,
    sunday_based_weekday,
    time_of_day_modifier,
)
from .notes import DEFAULT_NOTE_POOL, NotePool
from .random_source import FixedSource, RandomSource, default_source

# Storage and analysis
from .persistence import (
    PersistenceStrategy,
    InMemoryPersistence,
    JsonPersistence,
    clear_seeded_logs,
    seed_logs,
)
from .analysis import format_summary, summarize
from .errors import CapacityLogError, InvalidArgument, StorageError

__all__ = [
    # Main entry points
    "generate",
    "CapacitySimulator",
    "DayStep",
    "ScoredEntry",
    "validate_years",
    # Schemas
    "CapacityObservation",
    "SimulationState",
    "DayTrace",
    "LogSummary",
    "CAPACITY_STATES",
    "CATEGORIES",
    # Scoring
    "capacity_score",
    "category_modifier",
    "day_of_week_modifier",
    "discretize",
    "sunday_based_weekday",
    "time_of_day_modifier",
    # Notes
    "NotePool",
    "DEFAULT_NOTE_POOL",
    # Random sources
    "RandomSource",
    "FixedSource",
    "default_source",
    # Persistence
    "PersistenceStrategy",
    "InMemoryPersistence",
    "JsonPersistence",
    "seed_logs",
    "clear_seeded_logs",
    # Analysis
    "summarize",
    "format_summary",
    # Errors
    "CapacityLogError",
    "InvalidArgument",
    "StorageError",
]
