from datetime import date

import pytest
from pydantic import ValidationError

from core.models.entries import FoodEntry, WorkoutEntry, new_id
from core.models.meal import NutritionRecord
from core.models.user import FitnessGoal, UserProfile, age_from_birthday, normalize_goal

BASE = dict(name="Kiran", height="172", weight="68", age="31", workoutLevel="1-2")


@pytest.mark.parametrize(
    "raw, canonical",
    [
        ("weight_loss", FitnessGoal.lose_weight),
        ("muscle_gain", FitnessGoal.build_muscle),
        ("maintenance", FitnessGoal.maintain),
        ("lose_weight", FitnessGoal.lose_weight),
        ("gain_weight", FitnessGoal.gain_weight),
        (" Build_Muscle ", FitnessGoal.build_muscle),
    ],
)
def test_goal_aliases_are_canonicalised(raw, canonical):
    assert normalize_goal(raw) is canonical
    assert UserProfile(**BASE, fitnessGoal=raw).fitness_goal is canonical


def test_unknown_goal_rejected():
    with pytest.raises(ValidationError):
        UserProfile(**BASE, fitnessGoal="get_swole")


@pytest.mark.parametrize("missing", ["name", "height", "weight", "age", "workoutLevel"])
def test_required_fields(missing):
    data = {**BASE, "fitnessGoal": "maintain"}
    data.pop(missing)
    with pytest.raises(ValidationError):
        UserProfile(**data)


def test_blank_or_non_numeric_rejected():
    with pytest.raises(ValidationError):
        UserProfile(**{**BASE, "name": "   "}, fitnessGoal="maintain")
    with pytest.raises(ValidationError):
        UserProfile(**{**BASE, "weight": "heavy"}, fitnessGoal="maintain")


def test_age_derived_from_birthday():
    born = date(1990, 12, 31)
    assert age_from_birthday(born, today=date(2026, 10, 18)) == 35
    assert age_from_birthday(born, today=date(2026, 12, 31)) == 36

    data = {**BASE, "fitnessGoal": "maintain", "birthday": "1990-01-01"}
    data.pop("age")
    profile = UserProfile(**data)
    assert int(profile.age) == age_from_birthday(date(1990, 1, 1))


def test_ids_are_unique_and_increasing():
    ids = [int(new_id()) for _ in range(50)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 50


def test_food_entry_rejects_negative_values():
    with pytest.raises(ValidationError):
        FoodEntry(id="1", date="2026-10-18T08:00:00", meal="lunch", food="Dal", calories=-5)
    with pytest.raises(ValidationError):
        FoodEntry(id="1", date="2026-10-18T08:00:00", meal="snack", food="Dal", calories=5)


def test_workout_requires_exercise():
    with pytest.raises(ValidationError):
        WorkoutEntry(id="1", date="2026-10-18", exercise="  ")


def test_nutrition_record_accepts_ints():
    rec = NutritionRecord(name="Egg", calories=155, protein=13, carbs=1, fat=11)
    assert rec.calories == 155.0
