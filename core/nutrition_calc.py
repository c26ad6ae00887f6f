"""
core/nutrition_calc.py
────────────────────────────────────────────────────────────────────────
Turns ledger + profile data into the numbers the dashboard shows:

1. Today's food entries (device-local calendar day)
2. Calories per meal slot + overall total
3. Macro totals (protein / carbs / fat)
4. Progress toward the daily calorie target
5. BMI + four-band classification
6. Per-day calorie history for the last N days
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable

import pandas as pd

from core.models.entries import FoodEntry, MealSlot
from core.models.user import HeightUnit, UserProfile, WeightUnit

_LOG = logging.getLogger(__name__)

DEFAULT_TARGET_CALORIES = 2000

_FT_TO_M = 0.3048
_LB_TO_KG = 0.45359237

# (upper bound exclusive, status, comorbidity risk)
_BMI_BANDS = [
    (18.5, "Underweight", "Low"),
    (25.0, "Normal", "Average"),
    (30.0, "Overweight", "Moderate"),
    (math.inf, "Obese", "High"),
]
_NOT_AVAILABLE = "N/A"


# ──────────────────────────────────────────────────────────────────────
#  Result records
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class MealCalories:
    total_calories: int
    breakfast: int
    lunch: int
    dinner: int


@dataclass(frozen=True)
class MacroTotals:
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class DailySummary:
    calories: MealCalories
    macros: MacroTotals
    target_calories: float

    @property
    def progress(self) -> float:
        return calorie_progress(self.calories.total_calories, self.target_calories)

    @property
    def remaining_calories(self) -> float:
        return max(self.target_calories - self.calories.total_calories, 0)


@dataclass(frozen=True)
class BmiStatus:
    status: str
    risk: str


@dataclass(frozen=True)
class BmiReport:
    bmi: float
    status: str
    risk: str


# ──────────────────────────────────────────────────────────────────────
#  Day filtering
# ──────────────────────────────────────────────────────────────────────
def _local_date(stamp: str, tz: tzinfo | None = None) -> date | None:
    try:
        when = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
    if when.tzinfo is not None:
        when = when.astimezone(tz)
    return when.date()


def _today(now: datetime | None, tz: tzinfo | None) -> date:
    if now is None:
        now = datetime.now(tz)
    if now.tzinfo is not None:
        now = now.astimezone(tz)
    return now.date()


def todays_entries(
    entries: Iterable[FoodEntry],
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[FoodEntry]:
    """
    Keep entries logged on the same local calendar day as ``now``.

    Aware timestamps are converted to ``tz`` (system zone when None); naive
    ones are already local. Entries with an unreadable date are dropped.
    """
    today = _today(now, tz)
    kept: list[FoodEntry] = []
    for entry in entries:
        day = _local_date(entry.date, tz)
        if day is None:
            _LOG.debug("Skipping food entry %s with unreadable date %r", entry.id, entry.date)
            continue
        if day == today:
            kept.append(entry)
    return kept


def _frame(entries: list[FoodEntry]) -> pd.DataFrame:
    cols = ["meal", "calories", "protein", "carbs", "fat"]
    rows = [
        {
            "meal": e.meal.value,
            "calories": e.calories,
            "protein": e.protein,
            "carbs": e.carbs,
            "fat": e.fat,
        }
        for e in entries
    ]
    return pd.DataFrame(rows, columns=cols)


# ──────────────────────────────────────────────────────────────────────
#  Aggregates
# ──────────────────────────────────────────────────────────────────────
def _sum_meals(today: list[FoodEntry]) -> MealCalories:
    if not today:
        return MealCalories(0, 0, 0, 0)

    per_meal = _frame(today).groupby("meal")["calories"].sum()
    buckets = {slot.value: int(per_meal.get(slot.value, 0)) for slot in MealSlot}
    return MealCalories(
        total_calories=sum(buckets.values()),
        breakfast=buckets["breakfast"],
        lunch=buckets["lunch"],
        dinner=buckets["dinner"],
    )


def _sum_macros(today: list[FoodEntry]) -> MacroTotals:
    if not today:
        return MacroTotals(0.0, 0.0, 0.0)

    sums = _frame(today)[["protein", "carbs", "fat"]].astype(float).sum()
    return MacroTotals(
        protein=round(float(sums["protein"]), 1),
        carbs=round(float(sums["carbs"]), 1),
        fat=round(float(sums["fat"]), 1),
    )


def meal_calories(
    entries: Iterable[FoodEntry],
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> MealCalories:
    return _sum_meals(todays_entries(entries, now, tz))


def macro_totals(
    entries: Iterable[FoodEntry],
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> MacroTotals:
    return _sum_macros(todays_entries(entries, now, tz))


def daily_summary(
    entries: Iterable[FoodEntry],
    target: float = DEFAULT_TARGET_CALORIES,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> DailySummary:
    today = todays_entries(entries, now, tz)
    return DailySummary(
        calories=_sum_meals(today),
        macros=_sum_macros(today),
        target_calories=target,
    )


def calorie_progress(total, target=DEFAULT_TARGET_CALORIES) -> float:
    """min(total / target, 1.0), or 0.0 when either side is unusable."""
    try:
        total = float(total)
        target = float(target)
    except (TypeError, ValueError):
        return 0.0
    if not (math.isfinite(total) and math.isfinite(target)) or target <= 0:
        return 0.0
    return min(max(total / target, 0.0), 1.0)


def daily_calorie_history(
    entries: Iterable[FoodEntry],
    days: int = 7,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> dict[date, int]:
    """Calories per local day for the last ``days`` days, oldest first."""
    if days < 1:
        return {}
    today = _today(now, tz)
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]

    rows = []
    for e in entries:
        day = _local_date(e.date, tz)
        if day is not None and window[0] <= day <= today:
            rows.append({"day": day, "calories": e.calories})
    if not rows:
        return {day: 0 for day in window}

    per_day = pd.DataFrame(rows).groupby("day")["calories"].sum()
    per_day = per_day.reindex(window, fill_value=0)
    return {day: int(total) for day, total in per_day.items()}


# ──────────────────────────────────────────────────────────────────────
#  BMI
# ──────────────────────────────────────────────────────────────────────
def _to_float(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def calculate_bmi(
    height,
    weight,
    height_unit: str | HeightUnit = HeightUnit.cm,
    weight_unit: str | WeightUnit = WeightUnit.kg,
) -> float:
    """weight(kg) / height(m)², one decimal; 0.0 when an input is unusable."""
    h = _to_float(height)
    w = _to_float(weight)
    if h is None or w is None or h <= 0 or w <= 0:
        return 0.0

    height_m = h * _FT_TO_M if height_unit == HeightUnit.ft else h / 100
    weight_kg = w * _LB_TO_KG if weight_unit == WeightUnit.lbs else w
    return round(weight_kg / (height_m * height_m), 1)


def classify_bmi(bmi) -> BmiStatus:
    value = _to_float(bmi)
    if value is None or value <= 0:
        return BmiStatus(_NOT_AVAILABLE, _NOT_AVAILABLE)
    # last band is open-ended, so next() always finds one
    return next(BmiStatus(status, risk) for upper, status, risk in _BMI_BANDS if value < upper)


def bmi_report(profile: UserProfile | None) -> BmiReport:
    if profile is None:
        return BmiReport(0.0, _NOT_AVAILABLE, _NOT_AVAILABLE)
    bmi = calculate_bmi(profile.height, profile.weight, profile.height_unit, profile.weight_unit)
    band = classify_bmi(bmi)
    return BmiReport(bmi=bmi, status=band.status, risk=band.risk)
