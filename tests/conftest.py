"""Shared test fixtures."""

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from meal_analysis.config import Settings
from meal_analysis.domain.nutrition import NutritionEstimate
from meal_analysis.domain.profile import UserNutritionProfile
from meal_analysis.domain.replacement import MealReplacementRequest
from meal_analysis.domain.stats import MealRecord
from meal_analysis.services.analysis import AnalysisService
from meal_analysis.services.completion import CompletionClient

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"fake-jpeg-body"


@dataclass
class FakeCompletionClient(CompletionClient):
    """Fake completion client returning canned replies and recording calls."""

    replies: list[str] = field(default_factory=list)
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        system_prompt: str,
        user_text: str,
        max_tokens: int,
        temperature: float,
        image: bytes | None = None,
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "system_prompt": system_prompt,
                "user_text": user_text,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "image": image,
            }
        )
        if self.error is not None:
            raise self.error
        return self.replies.pop(0)


def make_service(
    *replies: str, error: Exception | None = None
) -> tuple[AnalysisService, FakeCompletionClient]:
    client = FakeCompletionClient(replies=list(replies), error=error)
    return AnalysisService(client=client), client


def planned_meal_payload(meal_timing: str, name: str = "Oat Bowl") -> dict[str, object]:
    return {
        "name": name,
        "description": "Rolled oats with berries",
        "meal_timing": meal_timing,
        "dietary_category": "BALANCED",
        "prep_time_minutes": 10,
        "difficulty_level": 1,
        "calories": 450,
        "protein_g": 20,
        "carbs_g": 60,
        "fats_g": 12,
        "fiber_g": 9,
        "sugar_g": 14,
        "sodium_mg": 120,
        "ingredients": [
            {"name": "Oats", "quantity": 60, "unit": "g", "category": "Grains"}
        ],
        "instructions": [{"step": 1, "text": "Simmer oats in milk."}],
        "allergens": ["gluten"],
        "image_url": "https://example.com/oats.jpg",
        "portion_multiplier": 1.0,
        "is_optional": False,
    }


def weekly_plan_payload(timings: list[str], days: int = 7) -> dict[str, object]:
    names = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
    return {
        "weekly_plan": [
            {
                "day": names[index % 7],
                "day_index": index,
                "meals": [planned_meal_payload(timing) for timing in timings],
            }
            for index in range(days)
        ],
        "weekly_nutrition_summary": {
            "avg_daily_calories": 1950,
            "avg_daily_protein": 120,
            "avg_daily_carbs": 230,
            "avg_daily_fats": 65,
            "goal_adherence_percentage": 92,
        },
        "shopping_tips": ["Buy oats in bulk"],
        "meal_prep_suggestions": ["Soak oats overnight"],
    }


def as_reply(payload: object, prose: bool = True) -> str:
    body = json.dumps(payload)
    if not prose:
        return body
    return f"Here is your result:\n```json\n{body}\n```\nEnjoy!"


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="openai-key", openai_model="gpt-4o")


@pytest.fixture
def estimate() -> NutritionEstimate:
    return NutritionEstimate(
        name="Chicken Rice Bowl",
        description="Grilled chicken over white rice",
        calories=600,
        protein=40,
        carbs=70,
        fat=16,
        fiber=3,
        sugar=2,
        sodium=700,
        confidence=80,
        ingredients=["chicken", "rice", "soy sauce"],
        serving_size="1 bowl",
        cooking_method="Grilled",
        health_notes="Balanced macros",
    )


@pytest.fixture
def profile() -> UserNutritionProfile:
    return UserNutritionProfile(
        age=34,
        weight_kg=72.5,
        height_cm=178,
        target_calories_daily=2000,
        target_protein_daily=150,
        target_carbs_daily=220,
        target_fats_daily=60,
        meals_per_day=3,
        snacks_per_day=1,
        dietary_preferences=frozenset({"MEDITERRANEAN"}),
        excluded_ingredients=frozenset({"pork", "shellfish"}),
        allergies=["peanuts", {"name": "sesame", "severity": "HIGH"}],
        avoided_foods=[{"name": "liver"}, "tripe"],
        cooking_skill_level="INTERMEDIATE",
        available_cooking_time="45 minutes",
        kitchen_equipment=("oven", "blender"),
    )


@pytest.fixture
def replacement_request() -> MealReplacementRequest:
    return MealReplacementRequest.model_validate(
        {
            "current_meal": {
                "name": "Tuna Salad",
                "meal_timing": "LUNCH",
                "dietary_category": "HIGH_PROTEIN",
            },
            "user_preferences": {
                "dietary_preferences": ["PESCATARIAN"],
                "excluded_ingredients": ["mayonnaise"],
                "allergies": ["walnuts"],
                "preferred_dietary_category": "HIGH_PROTEIN",
                "max_prep_time": 20,
            },
            "nutrition_targets": {"target_calories": 550, "target_protein": 35},
        }
    )


@pytest.fixture
def meals() -> list[MealRecord]:
    start = datetime(2026, 3, 2, 8, tzinfo=UTC)
    return [
        MealRecord("Oats", start, 400, 20, 60, 10),
        MealRecord("Burger", start + timedelta(hours=5), 900, 45, 70, 45, True),
        MealRecord("Salmon", start + timedelta(hours=11), 700, 50, 30, 30),
        MealRecord("Toast", start + timedelta(days=1), 300, 10, 40, 8, True),
    ]
