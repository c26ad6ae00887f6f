"""
services/storage.py
────────────────────────────────────────────────────────────────────────
* Key-value contract shared by every persisted collection
* In-process dict backend (SQL backend lives in services/db.py)
* Profile store + food / workout ledgers

Each collection is one JSON value under one key and is always read and
written whole. Appends are read → concat → write with no locking, so two
overlapping writers can drop one record; there is only ever one user.
"""
from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Generic, Protocol, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from core.errors import StorageError
from core.models.entries import FoodEntry, WorkoutEntry
from core.models.user import UserProfile
from core.nutrition_calc import todays_entries

_LOG = logging.getLogger(__name__)

# ───────── keys ──────────────────────────────────────────────────────
USER_DATA_KEY = "userData"
FOOD_ENTRIES_KEY = "foodEntries"
WORKOUT_ENTRIES_KEY = "workoutEntries"
DIET_PLANS_KEY = "savedDietPlans"


class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


class MemoryKeyValueStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)


# ───────── whole-list JSON collections ───────────────────────────────
T = TypeVar("T", bound=BaseModel)


class JsonListStore(Generic[T]):
    def __init__(self, kv: KeyValueStore, key: str, model: type[T]) -> None:
        self._kv = kv
        self.key = key
        self._adapter = TypeAdapter(list[model])

    async def load(self) -> list[T]:
        raw = await self._kv.get(self.key)
        if raw is None:
            return []
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as exc:
            _LOG.error("Stored %s could not be decoded: %s", self.key, exc)
            raise StorageError(self.key, "stored data could not be decoded") from exc

    async def save(self, items: list[T]) -> None:
        payload = self._adapter.dump_json(items, by_alias=True).decode("utf-8")
        await self._kv.set(self.key, payload)


# ───────── profile ───────────────────────────────────────────────────
class ProfileStore:
    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    async def get(self) -> UserProfile | None:
        """Stored profile, or None when absent or unreadable (logged)."""
        try:
            raw = await self._kv.get(USER_DATA_KEY)
        except StorageError as exc:
            _LOG.error("Error getting user data: %s", exc)
            return None
        if raw is None:
            return None
        try:
            return UserProfile.model_validate_json(raw)
        except ValidationError as exc:
            _LOG.error("Stored user data is invalid: %s", exc)
            return None

    async def save(self, profile: UserProfile) -> None:
        await self._kv.set(USER_DATA_KEY, profile.model_dump_json(by_alias=True))

    async def clear(self) -> None:
        await self._kv.remove(USER_DATA_KEY)


# ───────── ledgers ───────────────────────────────────────────────────
class FoodLedger:
    def __init__(self, kv: KeyValueStore) -> None:
        self._store = JsonListStore(kv, FOOD_ENTRIES_KEY, FoodEntry)

    async def entries(self) -> list[FoodEntry]:
        return await self._store.load()

    async def append(self, entry: FoodEntry) -> None:
        entries = await self._store.load()
        entries.append(entry)
        await self._store.save(entries)

    async def today(self, now: datetime | None = None, tz: tzinfo | None = None) -> list[FoodEntry]:
        return todays_entries(await self._store.load(), now, tz)


class WorkoutLedger:
    """Newest workout first."""

    def __init__(self, kv: KeyValueStore) -> None:
        self._store = JsonListStore(kv, WORKOUT_ENTRIES_KEY, WorkoutEntry)

    async def entries(self) -> list[WorkoutEntry]:
        return await self._store.load()

    async def add(self, entry: WorkoutEntry) -> None:
        entries = await self._store.load()
        await self._store.save([entry, *entries])

    async def delete(self, entry_id: str) -> bool:
        entries = await self._store.load()
        kept = [e for e in entries if e.id != entry_id]
        if len(kept) == len(entries):
            return False
        await self._store.save(kept)
        return True
