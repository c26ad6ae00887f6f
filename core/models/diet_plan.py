from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_BULLET = re.compile(r"^[•\-\*]\s*")

MEAL_FIELDS = ("breakfast", "lunch", "dinner", "snacks")


class DietPlanDraft(BaseModel):
    """Shape the generation service must return for a diet plan."""

    breakfast: str = Field(..., min_length=1)
    lunch: str = Field(..., min_length=1)
    dinner: str = Field(..., min_length=1)
    snacks: str = Field(..., min_length=1)
    tips: list[str]

    @field_validator("breakfast", "lunch", "dinner", "snacks", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class DietPlan(DietPlanDraft):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    created_at: str
    is_expanded: bool = True

    def meal_items(self, slot: str) -> list[str]:
        """Split one meal's free text into bullet-free, non-empty lines."""
        if slot not in MEAL_FIELDS:
            raise ValueError(f"unknown meal slot {slot!r}")
        text = getattr(self, slot)
        return [_BULLET.sub("", line.strip()) for line in text.splitlines() if line.strip()]
