"""
Pull the JSON object out of free-form model text and validate its shape.

The model is asked for JSON but usually wraps it in prose or code fences,
so parsing starts at the first ``{`` and stops at the brace that closes it.
"""

from __future__ import annotations

import json

from pydantic import ValidationError

from core.errors import InvalidStructure
from core.models.diet_plan import DietPlanDraft
from core.models.meal import NutritionRecord


def _balanced_span(raw: str) -> str | None:
    start = raw.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(raw)):
        ch = raw[pos]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return raw[start : pos + 1]
    return None


def extract_json_object(raw: str) -> dict:
    """Return the first balanced ``{...}`` in ``raw`` parsed as a dict."""
    if not isinstance(raw, str):
        raise InvalidStructure("Response text is not a string")

    span = _balanced_span(raw)
    if span is None:
        raise InvalidStructure("Could not find valid JSON in response", raw_output=raw)
    try:
        data = json.loads(span)
    except json.JSONDecodeError as exc:
        raise InvalidStructure(f"Malformed JSON in response: {exc}", raw_output=raw) from exc
    if not isinstance(data, dict):
        raise InvalidStructure("JSON in response is not an object", raw_output=raw)
    return data


def parse_diet_plan(raw: str) -> DietPlanDraft:
    data = extract_json_object(raw)
    try:
        return DietPlanDraft.model_validate(data)
    except ValidationError as exc:
        raise InvalidStructure(f"Invalid diet plan structure: {_fields(exc)}", raw_output=raw) from exc


def parse_nutrition(raw: str) -> NutritionRecord:
    data = extract_json_object(raw)
    try:
        return NutritionRecord.model_validate(data)
    except ValidationError as exc:
        raise InvalidStructure(f"Invalid nutrition data structure: {_fields(exc)}", raw_output=raw) from exc


def _fields(exc: ValidationError) -> str:
    return ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
