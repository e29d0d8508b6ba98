"""Deterministic fallback results used when the model is unavailable."""

import hashlib

from meal_analysis.domain.meal_plan import (
    DAY_NAMES,
    DayPlan,
    MealTiming,
    PlannedMeal,
    WeeklyMealPlan,
    WeeklySummary,
    meal_timings,
)
from meal_analysis.domain.nutrition import NutritionEstimate, round_half_up
from meal_analysis.domain.profile import UserNutritionProfile
from meal_analysis.domain.replacement import (
    MealReplacementRequest,
    MealReplacementResult,
)

INTENSIFIERS = ("more", "extra", "additional")
REDUCTIONS = ("less", "smaller")
INCREASE_FACTOR = 1.3
DECREASE_FACTOR = 0.7
FALLBACK_ADHERENCE_PERCENTAGE = 80.0
FALLBACK_REPLACEMENT_REASON = (
    "Generated as a safe alternative when AI generation fails"
)

_SAMPLE_MEALS: tuple[dict[str, object], ...] = (
    {
        "name": "Grilled Chicken Salad",
        "description": (
            "Fresh mixed greens with grilled chicken breast, cherry tomatoes, "
            "and olive oil dressing"
        ),
        "calories": 350,
        "protein": 35,
        "carbs": 12,
        "fat": 18,
        "fiber": 6,
        "sugar": 8,
        "sodium": 450,
        "ingredients": [
            "chicken breast",
            "mixed greens",
            "cherry tomatoes",
            "olive oil",
            "lemon",
        ],
        "cookingMethod": "Grilled",
        "healthNotes": "High protein, low carb meal with healthy fats",
    },
    {
        "name": "Pasta with Marinara",
        "description": (
            "Whole wheat pasta with homemade marinara sauce and fresh basil"
        ),
        "calories": 420,
        "protein": 15,
        "carbs": 65,
        "fat": 8,
        "fiber": 8,
        "sugar": 12,
        "sodium": 680,
        "ingredients": [
            "whole wheat pasta",
            "tomatoes",
            "garlic",
            "basil",
            "olive oil",
        ],
        "cookingMethod": "Boiled and simmered",
        "healthNotes": "Good source of complex carbohydrates and fiber",
    },
    {
        "name": "Avocado Toast",
        "description": (
            "Whole grain bread topped with mashed avocado, tomato, and a "
            "sprinkle of salt"
        ),
        "calories": 280,
        "protein": 8,
        "carbs": 25,
        "fat": 18,
        "fiber": 10,
        "sugar": 3,
        "sodium": 320,
        "ingredients": ["whole grain bread", "avocado", "tomato", "salt", "pepper"],
        "cookingMethod": "Toasted",
        "healthNotes": "Rich in healthy monounsaturated fats and fiber",
    },
)


def fallback_estimate(
    image_bytes: bytes, update_text: str | None = None
) -> NutritionEstimate:
    """Pick a sample meal keyed by the image digest, adjusted by any clarification."""
    digest = hashlib.sha256(image_bytes).digest()
    sample = _SAMPLE_MEALS[digest[0] % len(_SAMPLE_MEALS)]
    estimate = NutritionEstimate.model_validate(
        {
            **sample,
            "confidence": 85,
            "servingSize": "1 serving",
            "isFallback": True,
        }
    )
    if update_text:
        return apply_update_heuristic(estimate, update_text)
    return estimate


def apply_update_heuristic(
    original: NutritionEstimate, update_text: str
) -> NutritionEstimate:
    """Scale or annotate an estimate from keywords in the clarification text."""
    lowered = update_text.lower()
    description = original.description or ""
    changes: dict[str, object] = {"is_fallback": True}
    if any(token in lowered for token in INTENSIFIERS):
        changes.update(_scaled_macros(original, INCREASE_FACTOR))
        changes["name"] = f"{original.name} (Updated)"
        changes["description"] = f"{description} - Updated with: {update_text}"
    elif any(token in lowered for token in REDUCTIONS):
        changes.update(_scaled_macros(original, DECREASE_FACTOR))
        changes["name"] = f"{original.name} (Smaller Portion)"
    else:
        changes["name"] = f"{original.name} (Updated)"
        changes["description"] = f"{description} - Additional info: {update_text}"
    return original.model_copy(update=changes)


def _scaled_macros(estimate: NutritionEstimate, factor: float) -> dict[str, float]:
    return {
        field: float(round_half_up(getattr(estimate, field) * factor))
        for field in ("calories", "protein", "carbs", "fat")
    }


def fallback_meal_plan(profile: UserNutritionProfile) -> WeeklyMealPlan:
    """Build a seven-day plan that splits the daily targets evenly across slots."""
    timings = meal_timings(profile.meals_per_day, profile.snacks_per_day)
    slots = profile.slots_per_day
    per_slot = {
        "calories": round_half_up(profile.target_calories_daily / slots),
        "protein_g": round_half_up(profile.target_protein_daily / slots),
        "carbs_g": round_half_up(profile.target_carbs_daily / slots),
        "fats_g": round_half_up(profile.target_fats_daily / slots),
    }
    weekly_plan = [
        DayPlan(
            day=day,
            day_index=index,
            meals=[_fallback_meal(timing, index, per_slot) for timing in timings],
        )
        for index, day in enumerate(DAY_NAMES)
    ]
    return WeeklyMealPlan(
        weekly_plan=weekly_plan,
        weekly_nutrition_summary=WeeklySummary(
            avg_daily_calories=profile.target_calories_daily,
            avg_daily_protein=profile.target_protein_daily,
            avg_daily_carbs=profile.target_carbs_daily,
            avg_daily_fats=profile.target_fats_daily,
            goal_adherence_percentage=FALLBACK_ADHERENCE_PERCENTAGE,
        ),
        shopping_tips=[
            "Plan your shopping list based on the weekly meals",
            "Buy seasonal produce for better prices",
        ],
        meal_prep_suggestions=[
            "Prepare ingredients in advance",
            "Cook proteins in bulk",
        ],
        is_fallback=True,
    )


def _fallback_meal(
    timing: MealTiming, day_index: int, per_slot: dict[str, int]
) -> PlannedMeal:
    label = timing.value.lower().replace("_", " ")
    return PlannedMeal.model_validate(
        {
            "name": f"{label.capitalize()} {day_index + 1}",
            "description": f"A nutritious {label} meal",
            "meal_timing": timing,
            "prep_time_minutes": 15,
            "difficulty_level": 1,
            **per_slot,
            "fiber_g": 5,
            "sugar_g": 8,
            "sodium_mg": 400,
            "ingredients": [
                {
                    "name": "Mixed ingredients",
                    "quantity": 100,
                    "unit": "g",
                    "category": "Mixed",
                }
            ],
            "instructions": [
                {"step": 1, "text": "Prepare according to your preferences"}
            ],
        }
    )


def fallback_replacement(request: MealReplacementRequest) -> MealReplacementResult:
    """Clone the current meal's slot and macros under an alternative name."""
    current = request.current_meal
    return MealReplacementResult.model_validate(
        {
            "name": f"Alternative {current.name}",
            "description": f"A replacement meal similar to {current.name}",
            "meal_timing": current.meal_timing,
            "dietary_category": current.dietary_category,
            "prep_time_minutes": 20,
            "difficulty_level": 2,
            "calories": _or_default(current.calories, 400),
            "protein_g": _or_default(current.protein_g, 25),
            "carbs_g": _or_default(current.carbs_g, 35),
            "fats_g": _or_default(current.fats_g, 15),
            "fiber_g": 8,
            "sugar_g": 5,
            "sodium_mg": 600,
            "ingredients": [
                {
                    "name": "Alternative ingredients",
                    "quantity": 100,
                    "unit": "g",
                    "category": "Mixed",
                }
            ],
            "instructions": [
                {"step": 1, "text": "Prepare according to your dietary preferences"}
            ],
            "replacement_reason": FALLBACK_REPLACEMENT_REASON,
            "is_fallback": True,
        }
    )


def _or_default(value: float | None, default: float) -> float:
    return default if value is None else value
