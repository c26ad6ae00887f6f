import pytest

from core.errors import GenerationErrorKind, InvalidStructure, RequestFailed
from core.response_parser import extract_json_object, parse_diet_plan, parse_nutrition


def test_prose_around_json_is_ignored():
    raw = 'Here is your plan: {"breakfast":"poha","lunch":"dal"} Enjoy!'
    assert extract_json_object(raw) == {"breakfast": "poha", "lunch": "dal"}


def test_code_fence_and_nested_braces():
    raw = 'Sure!\n```json\n{"a": {"b": [1, 2]}, "c": "x}y"}\n```\nAnything {else}?'
    assert extract_json_object(raw) == {"a": {"b": [1, 2]}, "c": "x}y"}


def test_escaped_quote_inside_string():
    raw = r'{"tip": "say \"no\" to {sugar}"} trailing'
    assert extract_json_object(raw) == {"tip": 'say "no" to {sugar}'}


@pytest.mark.parametrize(
    "raw",
    [
        "no json here at all",
        '{"breakfast": "poha"',           # never closed
        "{breakfast: poha}",              # not JSON
        "",
    ],
)
def test_unusable_text_is_a_structure_error(raw):
    with pytest.raises(InvalidStructure):
        extract_json_object(raw)


def test_plan_parses(plan_json):
    plan = parse_diet_plan(f"Namaste! {plan_json} Stay healthy.")
    assert plan.breakfast == "Poha with peanuts"
    assert plan.tips == ["Drink water", "Walk after meals", "Sleep 8 hours"]


def test_plan_missing_tips_is_structure_error_not_transport():
    raw = '{"breakfast": "poha", "lunch": "dal", "dinner": "khichdi", "snacks": "chana"}'
    with pytest.raises(InvalidStructure) as info:
        parse_diet_plan(raw)
    assert info.value.kind is GenerationErrorKind.INVALID_STRUCTURE
    assert not isinstance(info.value, RequestFailed)
    assert info.value.raw_output == raw


def test_plan_blank_meal_rejected():
    raw = '{"breakfast": "", "lunch": "dal", "dinner": "khichdi", "snacks": "chana", "tips": []}'
    with pytest.raises(InvalidStructure):
        parse_diet_plan(raw)


def test_nutrition_parses(nutrition_json):
    rec = parse_nutrition(nutrition_json)
    assert rec.name == "Paneer"
    assert rec.calories == 265
    assert rec.serving_size == "100 g"


@pytest.mark.parametrize(
    "raw",
    [
        '{"name": "Rice", "calories": "130", "protein": 2.7, "carbs": 28, "fat": 0.3}',
        '{"name": "Rice", "calories": true, "protein": 2.7, "carbs": 28, "fat": 0.3}',
        '{"name": "Rice", "calories": 130, "carbs": 28, "fat": 0.3}',
        '{"name": "", "calories": 130, "protein": 2.7, "carbs": 28, "fat": 0.3}',
    ],
)
def test_nutrition_requires_numeric_fields(raw):
    with pytest.raises(InvalidStructure):
        parse_nutrition(raw)


def test_nutrition_fiber_optional():
    rec = parse_nutrition('{"name": "Rice", "calories": 130, "protein": 2.7, "carbs": 28, "fat": 0.3}')
    assert rec.fiber == 0.0


def test_numeric_serving_size_kept_as_text():
    rec = parse_nutrition(
        '{"name": "Rice", "calories": 130, "protein": 2.7, "carbs": 28, "fat": 0.3, "serving_size": 100}'
    )
    assert rec.serving_size == "100"
