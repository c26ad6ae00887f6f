"""
services/tracker.py
────────────────────────────────────────────────────────────────────────
The actions the app's screens perform, wired over injected stores:

* onboarding / profile edit      → ProfileStore (whole-record overwrite)
* log food (AI lookup or catalog) → FoodLedger (pre-scaled entries)
* add / delete workout            → WorkoutLedger
* dashboard numbers               → core.nutrition_calc
* diet plans                      → GenerationClient + DietPlanStore

Validation problems raise InvalidInput before anything is written.
"""
from __future__ import annotations

import logging
import math
from datetime import date, datetime, timezone, tzinfo
from typing import Any

from pydantic import ValidationError

from config import settings
from core.errors import InvalidInput, PlanLimitReached
from core.food_catalog import FoodCatalog
from core.models.diet_plan import DietPlan
from core.models.entries import FoodEntry, FoodPortion, MealSlot, WorkoutEntry, new_id
from core.models.meal import FoodItem, NutritionRecord
from core.models.user import UserProfile
from core.nutrition_calc import BmiReport, DailySummary, bmi_report, daily_calorie_history, daily_summary
from services.db import SqlKeyValueStore
from services.diet_plans import DietPlanStore
from services.gemini import GenerationClient
from services.storage import FoodLedger, KeyValueStore, ProfileStore, WorkoutLedger

_LOG = logging.getLogger(__name__)


def _round_half_up(value: float, digits: int = 0) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def _quantity_multiplier(quantity_g: Any) -> float:
    """Grams → multiple of the 100 g reference; blank/zero/garbage means 1x."""
    try:
        grams = float(quantity_g)
    except (TypeError, ValueError):
        return 1.0
    if not math.isfinite(grams) or grams == 0:
        return 1.0
    if grams < 0:
        raise InvalidInput("Quantity must be a positive number", ["quantity"])
    return grams / 100


def _meal(meal: str | MealSlot) -> MealSlot:
    try:
        return MealSlot(meal)
    except ValueError as exc:
        raise InvalidInput(f"Unknown meal {meal!r}", ["meal"]) from exc


def _stamp(now: datetime | None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


class FitnessTracker:
    def __init__(
        self,
        kv: KeyValueStore,
        generator: GenerationClient,
        catalog: FoodCatalog | None = None,
        target_calories: float | None = None,
        max_plans: int | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self.profiles = ProfileStore(kv)
        self.food = FoodLedger(kv)
        self.workout_log = WorkoutLedger(kv)
        self.plans = DietPlanStore(kv, max_plans)
        self.catalog = catalog or FoodCatalog(limit=settings.catalog_result_limit)
        self._generator = generator
        self._target = target_calories or settings.target_calories
        self._tz = tz

    # ─────────────────────────── profile ──────────────────────────── #
    async def complete_onboarding(self, data: dict[str, Any]) -> UserProfile:
        return await self._store_profile(data)

    async def update_profile(self, data: dict[str, Any]) -> UserProfile:
        # edits replace the record; there is no partial patch
        return await self._store_profile(data)

    async def profile(self) -> UserProfile | None:
        return await self.profiles.get()

    async def reset_profile(self) -> None:
        await self.profiles.clear()

    async def _store_profile(self, data: dict[str, Any]) -> UserProfile:
        try:
            profile = UserProfile.model_validate(data)
        except ValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
            _LOG.info("Profile rejected, bad fields: %s", fields)
            raise InvalidInput("Please fill in all fields", fields) from exc
        await self.profiles.save(profile)
        return profile

    # ─────────────────────────── food ─────────────────────────────── #
    async def lookup_food(self, query: str) -> NutritionRecord:
        term = (query or "").strip()
        if not term:
            raise InvalidInput("Please enter a food item to search", ["query"])
        return await self._generator.get_food_nutrition(term)

    async def log_food(
        self,
        meal: str | MealSlot,
        record: NutritionRecord,
        quantity_g: Any = "100",
        now: datetime | None = None,
    ) -> FoodEntry:
        slot = _meal(meal)
        factor = _quantity_multiplier(quantity_g)
        entry = FoodEntry(
            id=new_id(),
            date=_stamp(now),
            meal=slot,
            food=record.name,
            calories=int(_round_half_up(record.calories * factor)),
            protein=_round_half_up(record.protein * factor, 1),
            carbs=_round_half_up(record.carbs * factor, 1),
            fat=_round_half_up(record.fat * factor, 1),
        )
        await self.food.append(entry)
        return entry

    async def log_catalog_food(
        self,
        meal: str | MealSlot,
        item: FoodItem | str,
        servings: float = 1.0,
        now: datetime | None = None,
    ) -> FoodEntry:
        slot = _meal(meal)
        if isinstance(item, str):
            found = self.catalog.get(item)
            if found is None:
                raise InvalidInput(f"{item!r} is not in the food catalog", ["food"])
            item = found
        if not isinstance(servings, (int, float)) or not math.isfinite(servings) or servings <= 0:
            raise InvalidInput("Servings must be a positive number", ["servings"])

        entry = FoodEntry(
            id=new_id(),
            date=_stamp(now),
            meal=slot,
            food=[FoodPortion(name=item.name, quantity=servings, unit="serving")],
            calories=int(_round_half_up(item.calories * servings)),
            protein=_round_half_up(item.protein * servings, 1),
            carbs=_round_half_up(item.carbs * servings, 1),
            fat=_round_half_up(item.fat * servings, 1),
        )
        await self.food.append(entry)
        return entry

    # ─────────────────────────── workouts ─────────────────────────── #
    async def add_workout(
        self,
        exercise: str,
        sets: str = "",
        reps: str = "",
        weight: str = "",
        notes: str = "",
        now: datetime | None = None,
    ) -> WorkoutEntry:
        if not (exercise or "").strip():
            raise InvalidInput("Please enter an exercise name", ["exercise"])
        entry = WorkoutEntry(
            id=new_id(),
            date=_stamp(now),
            exercise=exercise,
            sets=sets,
            reps=reps,
            weight=weight,
            notes=notes,
        )
        await self.workout_log.add(entry)
        return entry

    async def delete_workout(self, entry_id: str) -> bool:
        return await self.workout_log.delete(entry_id)

    async def workouts(self) -> list[WorkoutEntry]:
        return await self.workout_log.entries()

    # ─────────────────────────── dashboard ────────────────────────── #
    async def today(self, now: datetime | None = None) -> DailySummary:
        return daily_summary(await self.food.entries(), self._target, now, self._tz)

    async def calorie_history(self, days: int = 7, now: datetime | None = None) -> dict[date, int]:
        return daily_calorie_history(await self.food.entries(), days, now, self._tz)

    async def bmi(self) -> BmiReport:
        return bmi_report(await self.profiles.get())

    # ─────────────────────────── diet plans ───────────────────────── #
    async def diet_plans(self) -> DietPlanStore:
        await self.plans.ensure_loaded()
        return self.plans

    async def generate_diet_plan(self) -> DietPlan:
        profile = await self.profiles.get()
        if profile is None:
            raise InvalidInput("Please complete your profile first", ["profile"])

        store = await self.diet_plans()
        if store.is_full:
            raise PlanLimitReached(store.limit)

        draft = await self._generator.generate_diet_plan(profile)
        # the store checks capacity again: it may have filled during the await
        return await store.add(draft)


def build_tracker() -> FitnessTracker:
    """Tracker on the configured database and Gemini key."""
    return FitnessTracker(SqlKeyValueStore(settings.database_url), GenerationClient())
