"""Shared fixtures: in-memory storage, a stand-in Gemini SDK client, a profile."""
from __future__ import annotations

from types import SimpleNamespace

import pytest

from services.storage import MemoryKeyValueStore


def envelope(text):
    """Minimal generate_content response carrying ``text``."""
    return SimpleNamespace(
        candidates=[SimpleNamespace(content=SimpleNamespace(parts=[SimpleNamespace(text=text)]))]
    )


class _FakeModels:
    def __init__(self) -> None:
        self.outcomes: list = []
        self.calls: list[dict] = []

    async def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeGemini:
    """Quacks like ``genai.Client`` for ``client.aio.models.generate_content``."""

    def __init__(self) -> None:
        self.models = _FakeModels()
        self.aio = SimpleNamespace(models=self.models)

    def respond(self, text: str) -> "FakeGemini":
        self.models.outcomes.append(envelope(text))
        return self

    def respond_raw(self, resp) -> "FakeGemini":
        self.models.outcomes.append(resp)
        return self

    def fail(self, exc: BaseException) -> "FakeGemini":
        self.models.outcomes.append(exc)
        return self

    @property
    def calls(self) -> list[dict]:
        return self.models.calls


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def gemini():
    return FakeGemini()


@pytest.fixture
def profile_data():
    return {
        "name": "Asha",
        "height": "165",
        "weight": "60",
        "age": "29",
        "gender": "female",
        "workoutLevel": "3-4",
        "fitnessGoal": "weight_loss",
    }


PLAN_JSON = (
    '{"breakfast": "Poha with peanuts", "lunch": "Dal, roti, sabzi", '
    '"dinner": "Grilled paneer with salad", "snacks": "Roasted chana", '
    '"tips": ["Drink water", "Walk after meals", "Sleep 8 hours"]}'
)

NUTRITION_JSON = (
    '{"name": "Paneer", "calories": 265, "protein": 18.3, "carbs": 1.2, '
    '"fat": 20.8, "fiber": 0, "serving_size": "100 g"}'
)


@pytest.fixture
def plan_json():
    return PLAN_JSON


@pytest.fixture
def nutrition_json():
    return NUTRITION_JSON
