from __future__ import annotations

import threading
import time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MealSlot(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"


_ID_LOCK = threading.Lock()
_LAST_ID = 0


def new_id() -> str:
    """Millisecond timestamp id, bumped when two ids land in the same ms."""
    global _LAST_ID
    with _ID_LOCK:
        stamp = max(int(time.time() * 1000), _LAST_ID + 1)
        _LAST_ID = stamp
    return str(stamp)


class FoodPortion(BaseModel):
    name: str
    quantity: float = Field(..., ge=0)
    unit: str = "serving"


class FoodEntry(BaseModel):
    """One logged food; nutrition is already scaled to the logged quantity."""

    model_config = ConfigDict(frozen=True)

    id: str
    date: str
    meal: MealSlot
    food: str | list[FoodPortion]
    calories: int = Field(..., ge=0)
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fat: float = Field(0.0, ge=0)

    @property
    def label(self) -> str:
        if isinstance(self.food, str):
            return self.food
        return ", ".join(p.name for p in self.food)


class WorkoutEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    date: str
    exercise: str
    sets: str = ""
    reps: str = ""
    weight: str = ""
    notes: str = ""

    @field_validator("exercise")
    @classmethod
    def _exercise_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("exercise name is required")
        return v.strip()
