# services/gemini.py
from __future__ import annotations

import logging
from typing import Any

import httpx
from google import genai
from google.genai import errors as gerrors
from google.genai import types

from config import settings
from core.errors import InvalidResponseFormat, InvalidStructure, RequestFailed
from core.models.diet_plan import DietPlanDraft
from core.models.meal import NutritionRecord
from core.models.user import UserProfile
from core.response_parser import parse_diet_plan, parse_nutrition

_LOG = logging.getLogger(__name__)

# ───────────── Sampling per request type ─────────────
DIET_PLAN_CONFIG: dict[str, Any] = dict(
    temperature=0.7, top_k=40, top_p=0.95, max_output_tokens=1024
)
NUTRITION_CONFIG: dict[str, Any] = dict(
    temperature=0.3, top_k=20, top_p=0.8, max_output_tokens=512
)


# ───────────── API Key & Client ─────────────
def build_client(api_key: str | None = None) -> genai.Client:
    key = api_key or settings.gemini_api_key
    if not key:
        raise RuntimeError("GEMINI_API_KEY not set in environment")
    return genai.Client(api_key=key)


# ───────────── Prompts ─────────────
def diet_plan_prompt(profile: UserProfile) -> str:
    lines = [
        "Create a personalized Indian diet plan for:",
        f"- Age: {profile.age}",
        f"- Height: {profile.height} {profile.height_unit.value}",
        f"- Weight: {profile.weight} {profile.weight_unit.value}",
    ]
    if profile.gender:
        lines.append(f"- Gender: {profile.gender.value}")
    lines.append(f"- Workout frequency: {profile.workout_level.value} times per week")
    if profile.activity_level:
        lines.append(f"- Daily activity: {profile.activity_level.value.replace('_', ' ')}")
    lines.append(f"- Fitness goal: {profile.goal_label}")

    return "\n".join(lines) + """

Please provide a detailed Indian diet plan with:
1. Breakfast suggestion
2. Lunch suggestion
3. Dinner suggestion
4. Healthy snack options
5. 3-4 helpful tips

Make it specific to Indian cuisine and ingredients. Keep portions appropriate for the fitness goal.
Format the response as a JSON object with the following structure:
{
  "breakfast": "detailed breakfast suggestion",
  "lunch": "detailed lunch suggestion",
  "dinner": "detailed dinner suggestion",
  "snacks": "healthy snack options",
  "tips": ["tip1", "tip2", "tip3", "tip4"]
}
"""


def nutrition_prompt(food_name: str) -> str:
    return f"""Provide detailed nutritional information for: "{food_name}"

Please analyze this food item and provide accurate nutritional data per 100g serving.
If it's a prepared dish, estimate based on typical ingredients and preparation methods.

Format the response as a JSON object with the following structure:
{{
  "name": "standardized food name",
  "calories": number (per 100g),
  "protein": number (grams per 100g),
  "carbs": number (grams per 100g),
  "fat": number (grams per 100g),
  "fiber": number (grams per 100g),
  "serving_size": "typical serving size description"
}}

Be as accurate as possible with the nutritional values.
"""


# ───────────── Response envelope ─────────────
def candidate_text(resp: Any) -> str:
    """First candidate's first text part, or InvalidResponseFormat."""
    try:
        text = resp.candidates[0].content.parts[0].text
    except (AttributeError, IndexError, TypeError):
        text = None
    if not isinstance(text, str) or not text.strip():
        raise InvalidResponseFormat("Invalid response format from Gemini API")
    return text


# ───────────── Client ─────────────
class GenerationClient:
    """
    Diet plans and per-100 g nutrition from Gemini.

    Nothing here retries: every failure surfaces as a GenerationError
    subclass and the caller decides whether to ask again.
    """

    def __init__(self, client: Any = None, model: str | None = None) -> None:
        self._client = client if client is not None else build_client()
        self._model = model or settings.gemini_model

    async def _generate(self, prompt: str, config: dict[str, Any]) -> str:
        try:
            resp = await self._client.aio.models.generate_content(
                model=self._model,
                contents=[prompt],
                config=types.GenerateContentConfig(**config),
            )
        except gerrors.APIError as exc:
            _LOG.error("Gemini request failed with status %s: %s", exc.code, exc)
            raise RequestFailed(f"API request failed with status {exc.code}", status=exc.code) from exc
        except httpx.HTTPError as exc:
            _LOG.error("Gemini request failed: %s", exc)
            raise RequestFailed(f"API request failed: {exc}") from exc

        try:
            return candidate_text(resp)
        except InvalidResponseFormat:
            _LOG.error("Gemini returned no usable candidate")
            raise

    async def generate_diet_plan(self, profile: UserProfile) -> DietPlanDraft:
        text = await self._generate(diet_plan_prompt(profile), DIET_PLAN_CONFIG)
        try:
            return parse_diet_plan(text)
        except InvalidStructure as exc:
            _LOG.error("Diet plan response rejected: %s", exc)
            raise

    async def get_food_nutrition(self, food_name: str) -> NutritionRecord:
        text = await self._generate(nutrition_prompt(food_name), NUTRITION_CONFIG)
        try:
            return parse_nutrition(text)
        except InvalidStructure as exc:
            _LOG.error("Nutrition response for %r rejected: %s", food_name, exc)
            raise
