"""Tests for revising an estimate with user clarifications."""

import asyncio
import json

import pytest

from meal_analysis.services.analysis import AnalysisService
from meal_analysis.services.fallbacks import apply_update_heuristic
from tests.conftest import as_reply, make_service


@pytest.mark.parametrize("text", ["give me more", "EXTRA sauce", "additional egg"])
def test_fallback_update_scales_up(estimate, text: str) -> None:
    service = AnalysisService(client=None)

    result = asyncio.run(service.update_analysis(estimate, text))

    assert result.calories == round(estimate.calories * 1.3)
    assert result.protein == round(estimate.protein * 1.3)
    assert result.carbs == round(estimate.carbs * 1.3)
    assert result.fat == round(estimate.fat * 1.3)
    assert result.name == "Chicken Rice Bowl (Updated)"
    assert result.description == (
        f"Grilled chicken over white rice - Updated with: {text}"
    )
    assert result.is_fallback is True


@pytest.mark.parametrize("text", ["a smaller portion", "less rice"])
def test_fallback_update_scales_down(estimate, text: str) -> None:
    service = AnalysisService(client=None)

    result = asyncio.run(service.update_analysis(estimate, text))

    assert result.calories == round(estimate.calories * 0.7)
    assert result.protein == round(estimate.protein * 0.7)
    assert result.carbs == round(estimate.carbs * 0.7)
    assert result.fat == round(estimate.fat * 0.7)
    assert result.name == "Chicken Rice Bowl (Smaller Portion)"
    assert result.description == estimate.description


def test_fallback_update_without_keyword_appends_text(estimate) -> None:
    service = AnalysisService(client=None)

    result = asyncio.run(service.update_analysis(estimate, "it was brown rice"))

    assert result.calories == estimate.calories
    assert result.protein == estimate.protein
    assert result.description == (
        "Grilled chicken over white rice - Additional info: it was brown rice"
    )
    assert result.name == "Chicken Rice Bowl (Updated)"


def test_heuristic_matches_substrings_case_insensitively(estimate) -> None:
    result = apply_update_heuristic(estimate, "Furthermore it was spicy")

    assert result.calories == round(estimate.calories * 1.3)


def test_heuristic_does_not_mutate_original(estimate) -> None:
    apply_update_heuristic(estimate, "more")

    assert estimate.calories == 600
    assert estimate.name == "Chicken Rice Bowl"


def test_live_update_carries_forward_omitted_fields(estimate) -> None:
    reply = as_reply(
        {
            "name": "Chicken Rice Bowl with Egg",
            "calories": 690,
            "protein": "n/a",
            "fat": None,
            "ingredients": ["chicken", "rice", "egg"],
            "healthNotes": "",
        }
    )
    service, client = make_service(reply)

    result = asyncio.run(service.update_analysis(estimate, "added a fried egg"))

    assert result.name == "Chicken Rice Bowl with Egg"
    assert result.calories == 690
    assert result.protein == estimate.protein
    assert result.fat == estimate.fat
    assert result.carbs == estimate.carbs
    assert result.sodium == estimate.sodium
    assert result.ingredients == ["chicken", "rice", "egg"]
    assert result.health_notes == estimate.health_notes
    assert result.serving_size == estimate.serving_size
    assert result.is_fallback is False
    call = client.calls[0]
    assert call["max_tokens"] == 800
    assert call["image"] is None


def test_live_update_serializes_original_verbatim(estimate) -> None:
    service, client = make_service(as_reply({"calories": 650}))

    asyncio.run(service.update_analysis(estimate, "extra sauce", language="french"))

    prompt = str(client.calls[0]["system_prompt"])
    assert json.dumps(estimate.to_prompt_json(), indent=2) in prompt
    assert '"extra sauce"' in prompt
    assert "Language for response: french" in prompt


def test_live_update_clamps_revised_values(estimate) -> None:
    service, _ = make_service(as_reply({"calories": -20, "confidence": 180}))

    result = asyncio.run(service.update_analysis(estimate, "no idea"))

    assert result.calories == 0
    assert result.confidence == 100


def test_live_update_falls_back_on_garbage(estimate) -> None:
    service, _ = make_service("I am not sure what changed.")

    result = asyncio.run(service.update_analysis(estimate, "more chicken"))

    assert result == apply_update_heuristic(estimate, "more chicken")


def test_live_update_falls_back_on_error(estimate) -> None:
    service, _ = make_service(error=RuntimeError("OpenAI returned an empty response"))

    result = asyncio.run(service.update_analysis(estimate, "less rice"))

    assert result == apply_update_heuristic(estimate, "less rice")
    assert result.is_fallback is True


def test_update_falls_back_on_deeply_nested_reply(estimate) -> None:
    service, _ = make_service('{"calories":' + "[" * 100_000 + "]" * 100_000 + "}")

    result = asyncio.run(service.update_analysis(estimate, "less rice"))

    assert result == apply_update_heuristic(estimate, "less rice")
