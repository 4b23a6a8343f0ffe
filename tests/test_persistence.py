"""Tests for capacity log persistence backends."""

import json
import random
from datetime import datetime, timezone

import pytest

from capacitylog import (
    CapacityObservation,
    FixedSource,
    InMemoryPersistence,
    InvalidArgument,
    JsonPersistence,
    StorageError,
    clear_seeded_logs,
    generate,
    seed_logs,
)
from capacitylog.persistence import DEFAULT_STORAGE_KEY, deserialize_logs, serialize_logs

ANCHOR = datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)


def make_observations() -> list[CapacityObservation]:
    return [
        CapacityObservation(id="b", timestamp=2_000, state="stretched", tags=["demand"], note="Deadline pressure"),
        CapacityObservation(id="a", timestamp=1_000, state="resourced"),
    ]


def test_serialized_records_match_client_shape():
    payload = json.loads(serialize_logs(make_observations()))
    assert payload[0] == {
        "id": "b",
        "timestamp": 2_000,
        "state": "stretched",
        "tags": ["demand"],
        "note": "Deadline pressure",
    }
    assert "note" not in payload[1]


@pytest.mark.parametrize("payload", ["not json", '{"id": "x"}', '[{"id": "x", "state": "ok"}]'])
def test_deserialize_rejects_bad_payloads(payload):
    with pytest.raises(StorageError):
        deserialize_logs(payload)


@pytest.mark.asyncio
async def test_in_memory_persistence_round_trip():
    persistence = InMemoryPersistence()
    await persistence.initialize()

    observations = make_observations()
    await persistence.save_logs("slot", observations)
    assert await persistence.load_logs("slot") == observations
    assert isinstance(persistence.slots["slot"], str)

    await persistence.clear_logs("slot")
    assert await persistence.load_logs("slot") == []
    # Clearing a missing key is a no-op
    await persistence.clear_logs("slot")

    await persistence.close()


@pytest.mark.asyncio
async def test_in_memory_persistence_surfaces_corrupt_slot():
    persistence = InMemoryPersistence()
    persistence.slots["slot"] = "[{"
    with pytest.raises(StorageError):
        await persistence.load_logs("slot")


@pytest.mark.asyncio
async def test_json_persistence_round_trip(tmp_path):
    persistence = JsonPersistence(tmp_path / "store")
    await persistence.initialize()

    path = persistence.path_for(DEFAULT_STORAGE_KEY)
    assert path.name == "_orbital_logs.json"

    observations = make_observations()
    await persistence.save_logs(DEFAULT_STORAGE_KEY, observations)
    assert path.exists()
    assert await persistence.load_logs(DEFAULT_STORAGE_KEY) == observations

    await persistence.clear_logs(DEFAULT_STORAGE_KEY)
    assert not path.exists()
    assert await persistence.load_logs(DEFAULT_STORAGE_KEY) == []
    await persistence.clear_logs(DEFAULT_STORAGE_KEY)

    await persistence.close()


@pytest.mark.asyncio
async def test_json_persistence_wraps_os_errors(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", "utf-8")

    persistence = JsonPersistence(blocker)
    with pytest.raises(StorageError) as excinfo:
        await persistence.initialize()
    assert isinstance(excinfo.value.__cause__, OSError)

    with pytest.raises(StorageError):
        await persistence.save_logs("slot", make_observations())


@pytest.mark.asyncio
async def test_json_persistence_wraps_undecodable_slot(tmp_path):
    persistence = JsonPersistence(tmp_path)
    await persistence.initialize()
    persistence.path_for("slot").write_bytes(b"\xff\xfe[]")

    with pytest.raises(StorageError) as excinfo:
        await persistence.load_logs("slot")
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


@pytest.mark.asyncio
async def test_seed_logs_stores_generated_collection():
    persistence = InMemoryPersistence()
    count = await seed_logs(persistence, 1, rng=random.Random(8), now=ANCHOR)

    stored = await persistence.load_logs(DEFAULT_STORAGE_KEY)
    assert count == len(stored)
    assert 366 <= count <= 4 * 366
    stamps = [observation.timestamp for observation in stored]
    assert stamps == sorted(stamps, reverse=True)

    await clear_seeded_logs(persistence)
    assert DEFAULT_STORAGE_KEY not in persistence.slots


@pytest.mark.asyncio
async def test_seed_logs_rejects_invalid_years_without_saving():
    persistence = InMemoryPersistence()
    with pytest.raises(InvalidArgument):
        await seed_logs(persistence, 0)
    assert persistence.slots == {}


@pytest.mark.asyncio
async def test_seed_logs_storage_failure_is_distinct_from_generation(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", "utf-8")
    persistence = JsonPersistence(blocker)

    with pytest.raises(StorageError):
        await seed_logs(persistence, 1, rng=FixedSource(0.5), now=ANCHOR)


@pytest.mark.asyncio
async def test_seed_logs_matches_direct_generation():
    persistence = InMemoryPersistence()
    count = await seed_logs(persistence, 1, key="custom", rng=FixedSource(0.5), now=ANCHOR)
    direct = generate(1, rng=FixedSource(0.5), now=ANCHOR)
    assert count == len(direct) == 732
