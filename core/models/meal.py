from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _json_number(v):
    # JSON numbers only: "120" or true are not calorie counts
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ValueError(f"expected a number, got {type(v).__name__}")
    return v


class FoodItem(BaseModel):
    """Catalog reference row; values are for the quantity named in ``name``."""

    model_config = ConfigDict(frozen=True)

    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    category: str


class NutritionRecord(BaseModel):
    """Nutrition for 100 g of a food, as returned by the generation service."""

    name: str = Field(..., min_length=1)
    calories: float = Field(..., ge=0)
    protein: float = Field(..., ge=0)
    carbs: float = Field(..., ge=0)
    fat: float = Field(..., ge=0)
    fiber: float = Field(0.0, ge=0)
    serving_size: str | None = None

    @field_validator("calories", "protein", "carbs", "fat", "fiber", mode="before")
    @classmethod
    def _numeric(cls, v):
        return _json_number(v)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("serving_size", mode="before")
    @classmethod
    def _serving_text(cls, v):
        # the model sometimes answers 100 instead of "100 g"
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v
