"""
PersistenceStrategy interface for storing generated capacity logs.

The simulator itself never touches storage. This module gives callers a
small pluggable layer that mirrors how the mobile client keeps logs: the
whole collection serialized as one JSON array under a single storage key.

Two included implementations:
1. InMemoryPersistence - Dict of JSON strings, data lost on exit (testing)
2. JsonPersistence - One JSON file per storage key (demo datasets, fixtures)

Every backend failure is raised as StorageError so callers can tell a failed
save apart from a rejected generate() call (InvalidArgument).

Usage pattern:
    persistence = JsonPersistence("capacity_logs")
    await persistence.initialize()
    count = await seed_logs(persistence, years=4)
    await persistence.close()
"""

import asyncio
import json
import re
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from pydantic import ValidationError

from .errors import StorageError
from .logging_utils import EMOJI_STORAGE, EMOJI_SUCCESS, log_storage, log_success
from .random_source import RandomSource
from .schemas import CapacityObservation
from .simulator import DEFAULT_YEARS, generate

DEFAULT_STORAGE_KEY = "@orbital:logs"


def serialize_logs(observations: Sequence[CapacityObservation]) -> str:
    """Serialize observations to the JSON array stored under one key."""

    return json.dumps([observation.to_record() for observation in observations])


def deserialize_logs(payload: str) -> List[CapacityObservation]:
    """Parse a stored JSON array back into observations.

    Raises:
        StorageError: If the payload is not a JSON array of valid records.
    """

    try:
        records = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise StorageError(f"stored logs are not valid JSON: {exc}") from exc

    if not isinstance(records, list):
        raise StorageError("stored logs must be a JSON array")

    try:
        return [CapacityObservation.from_record(record) for record in records]
    except ValidationError as exc:
        raise StorageError(f"stored logs contain an invalid record: {exc}") from exc


class PersistenceStrategy(ABC):
    """Abstract base class for capacity log storage backends.

    Async interface so file or database backends never block the caller's
    event loop; for InMemoryPersistence the async is a no-op.

    Method categories:
    1. Lifecycle: initialize(), close()
    2. Logs: save_logs(), load_logs(), clear_logs()

    A save replaces whatever was stored under the key.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend (create directories, open connections)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources."""
        pass

    @abstractmethod
    async def save_logs(self, key: str, observations: Sequence[CapacityObservation]) -> None:
        """
        Store the full observation collection under ``key``.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def load_logs(self, key: str) -> List[CapacityObservation]:
        """
        Return the collection stored under ``key`` (empty if none).

        Raises:
            StorageError: If the stored data cannot be read or parsed
        """
        pass

    @abstractmethod
    async def clear_logs(self, key: str) -> None:
        """
        Remove the collection stored under ``key``. Missing keys are ignored.

        Raises:
            StorageError: If the removal fails
        """
        pass


class InMemoryPersistence(PersistenceStrategy):
    """In-memory persistence holding serialized JSON strings per key.

    Stores the same string a key-value store would hold, so tests exercise
    the real serialization path. Data is lost when the process exits.
    """

    def __init__(self):
        self.slots: Dict[str, str] = {}

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        # Slots are kept so callers can inspect them after close.
        pass

    async def save_logs(self, key: str, observations: Sequence[CapacityObservation]) -> None:
        self.slots[key] = serialize_logs(observations)

    async def load_logs(self, key: str) -> List[CapacityObservation]:
        payload = self.slots.get(key)
        if payload is None:
            return []
        return deserialize_logs(payload)

    async def clear_logs(self, key: str) -> None:
        self.slots.pop(key, None)


class JsonPersistence(PersistenceStrategy):
    """File-based persistence writing one JSON array per storage key.

    Directory structure:
    ```
    {base_path}/
      _orbital_logs.json     # logs stored under "@orbital:logs"
    ```

    Keys are made filesystem-safe by replacing every character outside
    ``[A-Za-z0-9._-]`` with an underscore. All file I/O runs in a worker
    thread (asyncio.to_thread).
    """

    def __init__(self, base_path: Path | str = "capacity_logs"):
        self.base_path = Path(base_path)

    async def initialize(self) -> None:
        try:
            await asyncio.to_thread(self.base_path.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"cannot create storage directory {self.base_path}: {exc}") from exc

    async def close(self) -> None:
        return None

    async def save_logs(self, key: str, observations: Sequence[CapacityObservation]) -> None:
        path = self.path_for(key)
        payload = serialize_logs(observations)
        try:
            await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(path.write_text, payload, "utf-8")
        except OSError as exc:
            raise StorageError(f"cannot write logs to {path}: {exc}") from exc

    async def load_logs(self, key: str) -> List[CapacityObservation]:
        path = self.path_for(key)
        if not path.exists():
            return []
        try:
            payload = await asyncio.to_thread(path.read_text, "utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"cannot read logs from {path}: {exc}") from exc
        return deserialize_logs(payload)

    async def clear_logs(self, key: str) -> None:
        path = self.path_for(key)
        try:
            await asyncio.to_thread(path.unlink, True)
        except OSError as exc:
            raise StorageError(f"cannot remove {path}: {exc}") from exc

    def path_for(self, key: str) -> Path:
        safe_name = re.sub(r"[^A-Za-z0-9._-]", "_", key)
        return self.base_path / f"{safe_name}.json"


async def seed_logs(
    persistence: PersistenceStrategy,
    years: int = DEFAULT_YEARS,
    *,
    key: str = DEFAULT_STORAGE_KEY,
    rng: Optional[RandomSource] = None,
    now: Optional[datetime] = None,
    verbose: bool = False,
) -> int:
    """Generate a capacity log, store it under ``key``, and return its size.

    Generation runs first, so an invalid ``years`` raises InvalidArgument
    without touching storage. A failed save raises StorageError.
    """

    observations = generate(years, rng=rng, now=now, verbose=verbose)

    if verbose:
        log_storage(f"{EMOJI_STORAGE} Saving {len(observations)} observations under {key!r}")
    await persistence.save_logs(key, observations)
    if verbose:
        log_success(f"{EMOJI_SUCCESS} Saved {len(observations)} observations")

    return len(observations)


async def clear_seeded_logs(
    persistence: PersistenceStrategy,
    *,
    key: str = DEFAULT_STORAGE_KEY,
) -> None:
    """Remove previously seeded logs from ``key``."""

    await persistence.clear_logs(key)
