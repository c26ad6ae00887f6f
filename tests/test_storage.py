"""
Stores over the in-memory backend, plus the SQLite backend on a temp file.
"""
import json
from datetime import datetime

import pytest

from core.errors import StorageError
from core.models.entries import FoodEntry, WorkoutEntry
from core.models.user import FitnessGoal, UserProfile
from services.db import SqlKeyValueStore
from services.storage import (
    FOOD_ENTRIES_KEY,
    USER_DATA_KEY,
    WORKOUT_ENTRIES_KEY,
    FoodLedger,
    MemoryKeyValueStore,
    ProfileStore,
    WorkoutLedger,
)


def _food(i, when="2026-10-18T08:00:00", calories=100):
    return FoodEntry(id=str(i), date=when, meal="breakfast", food="Idli", calories=calories)


def _workout(i):
    return WorkoutEntry(id=str(i), date="2026-10-18T07:00:00", exercise="Squat", sets="3", reps="10")


class _BrokenStore(MemoryKeyValueStore):
    async def get(self, key):
        raise StorageError(key, "read failed")

    async def set(self, key, value):
        raise StorageError(key, "write failed")


# ── profile ──────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_profile_round_trip_uses_app_keys(kv, profile_data):
    store = ProfileStore(kv)
    assert await store.get() is None

    await store.save(UserProfile.model_validate(profile_data))

    stored = json.loads(await kv.get(USER_DATA_KEY))
    assert stored["fitnessGoal"] == "lose_weight"
    assert stored["workoutLevel"] == "3-4"
    loaded = await store.get()
    assert loaded.fitness_goal is FitnessGoal.lose_weight
    assert loaded.name == "Asha"


@pytest.mark.asyncio
async def test_profile_clear(kv, profile_data):
    store = ProfileStore(kv)
    await store.save(UserProfile.model_validate(profile_data))
    await store.clear()
    assert await store.get() is None


@pytest.mark.asyncio
async def test_unreadable_profile_reads_as_none():
    assert await ProfileStore(_BrokenStore()).get() is None
    corrupt = MemoryKeyValueStore({USER_DATA_KEY: "{not json"})
    assert await ProfileStore(corrupt).get() is None


@pytest.mark.asyncio
async def test_profile_save_failure_raises(profile_data):
    with pytest.raises(StorageError):
        await ProfileStore(_BrokenStore()).save(UserProfile.model_validate(profile_data))


# ── food ledger ──────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_food_ledger_appends_in_order(kv):
    ledger = FoodLedger(kv)
    await ledger.append(_food(1))
    await ledger.append(_food(2))
    assert [e.id for e in await ledger.entries()] == ["1", "2"]
    assert isinstance(json.loads(await kv.get(FOOD_ENTRIES_KEY)), list)


@pytest.mark.asyncio
async def test_food_ledger_today(kv):
    ledger = FoodLedger(kv)
    await ledger.append(_food(1, "2026-10-17T08:00:00"))
    await ledger.append(_food(2, "2026-10-18T08:00:00"))
    today = await ledger.today(now=datetime(2026, 10, 18, 21, 0))
    assert [e.id for e in today] == ["2"]


@pytest.mark.asyncio
async def test_reads_legacy_entry_shape():
    legacy = [{"id": "1", "date": "2026-10-18T08:00:00.000Z", "meal": "lunch",
               "food": "Rajma", "calories": 245, "protein": 15, "carbs": 45, "fat": 1}]
    ledger = FoodLedger(MemoryKeyValueStore({FOOD_ENTRIES_KEY: json.dumps(legacy)}))
    entries = await ledger.entries()
    assert entries[0].calories == 245
    assert entries[0].label == "Rajma"


@pytest.mark.asyncio
async def test_mismatched_stored_shape_is_storage_error():
    kv = MemoryKeyValueStore({FOOD_ENTRIES_KEY: json.dumps([{"id": "1"}])})
    ledger = FoodLedger(kv)
    with pytest.raises(StorageError):
        await ledger.append(_food(2))
    # nothing was written over the old value
    assert json.loads(await kv.get(FOOD_ENTRIES_KEY)) == [{"id": "1"}]


# ── workout ledger ───────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_workouts_newest_first_and_delete(kv):
    ledger = WorkoutLedger(kv)
    await ledger.add(_workout(1))
    await ledger.add(_workout(2))
    assert [w.id for w in await ledger.entries()] == ["2", "1"]

    assert await ledger.delete("1") is True
    assert await ledger.delete("missing") is False
    assert [w.id for w in await ledger.entries()] == ["2"]
    assert len(json.loads(await kv.get(WORKOUT_ENTRIES_KEY))) == 1


# ── SQL backend ──────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_sql_store_get_set_remove(tmp_path):
    store = SqlKeyValueStore(f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}")
    try:
        assert await store.get("foodEntries") is None
        await store.set("foodEntries", "[]")
        await store.set("foodEntries", '[{"id": "1"}]')
        assert await store.get("foodEntries") == '[{"id": "1"}]'
        await store.remove("foodEntries")
        assert await store.get("foodEntries") is None
    finally:
        await store.dispose()


@pytest.mark.asyncio
async def test_ledger_over_sql_store(tmp_path):
    store = SqlKeyValueStore(f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}")
    try:
        ledger = WorkoutLedger(store)
        await ledger.add(_workout(1))
        assert [w.exercise for w in await WorkoutLedger(store).entries()] == ["Squat"]
    finally:
        await store.dispose()
