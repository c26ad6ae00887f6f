from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel


class FitnessGoal(str, Enum):
    lose_weight = "lose_weight"
    gain_weight = "gain_weight"
    maintain = "maintain"
    build_muscle = "build_muscle"


# older app builds stored these spellings
GOAL_ALIASES: dict[str, FitnessGoal] = {
    "weight_loss": FitnessGoal.lose_weight,
    "muscle_gain": FitnessGoal.build_muscle,
    "maintenance": FitnessGoal.maintain,
}

GOAL_LABELS: dict[FitnessGoal, str] = {
    FitnessGoal.lose_weight: "Lose Weight",
    FitnessGoal.gain_weight: "Gain Weight",
    FitnessGoal.maintain: "Maintain",
    FitnessGoal.build_muscle: "Build Muscle",
}


class WorkoutLevel(str, Enum):
    beginner = "1-2"
    intermediate = "3-4"
    advanced = "5-6"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    low_active = "low_active"
    active = "active"
    very_active = "very_active"


class Gender(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class HeightUnit(str, Enum):
    cm = "cm"
    ft = "ft"


class WeightUnit(str, Enum):
    kg = "kg"
    lbs = "lbs"


def normalize_goal(value: str | FitnessGoal) -> FitnessGoal:
    """Map legacy goal spellings onto the canonical vocabulary."""
    if isinstance(value, FitnessGoal):
        return value
    key = str(value).strip().lower()
    if key in GOAL_ALIASES:
        return GOAL_ALIASES[key]
    return FitnessGoal(key)


def age_from_birthday(birthday: date, today: date | None = None) -> int:
    today = today or date.today()
    had_birthday = (today.month, today.day) >= (birthday.month, birthday.day)
    return today.year - birthday.year - (0 if had_birthday else 1)


class UserProfile(BaseModel):
    """The single onboarding record; every field except gender is required."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    height: str
    weight: str
    age: str
    workout_level: WorkoutLevel
    fitness_goal: FitnessGoal
    height_unit: HeightUnit = HeightUnit.cm
    weight_unit: WeightUnit = WeightUnit.kg
    gender: Gender | None = None
    birthday: date | None = None
    activity_level: ActivityLevel | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_age(cls, data):
        if not isinstance(data, dict):
            return data
        age = data.get("age")
        birthday = data.get("birthday")
        if (age is None or str(age).strip() == "") and birthday:
            born = date.fromisoformat(str(birthday)[:10])
            data = {**data, "age": str(age_from_birthday(born))}
        return data

    @field_validator("name", "height", "weight", "age", mode="before")
    @classmethod
    def _required_text(cls, v):
        if v is None:
            raise ValueError("field required")
        text = str(v).strip()
        if not text:
            raise ValueError("must not be blank")
        return text

    @field_validator("height", "weight", "age")
    @classmethod
    def _numeric_text(cls, v: str) -> str:
        try:
            float(v)
        except ValueError as exc:
            raise ValueError(f"{v!r} is not a number") from exc
        return v

    @field_validator("fitness_goal", mode="before")
    @classmethod
    def _canonical_goal(cls, v):
        if isinstance(v, str):
            return normalize_goal(v)
        return v

    @field_validator("gender", "activity_level", mode="before")
    @classmethod
    def _blank_is_none(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @property
    def goal_label(self) -> str:
        return GOAL_LABELS[self.fitness_goal]
