"""Prompt builders for nutrition analysis and meal planning."""

import json
from collections.abc import Sequence
from dataclasses import dataclass

from meal_analysis.domain.meal_plan import DEFAULT_MEAL_IMAGE_URL, MealTiming
from meal_analysis.domain.nutrition import NutritionEstimate
from meal_analysis.domain.profile import UserNutritionProfile, join_names
from meal_analysis.domain.replacement import MealReplacementRequest
from meal_analysis.domain.stats import MealRecord, NutritionStats


@dataclass(frozen=True)
class Prompt:
    """System instruction plus the user message text."""

    system: str
    user: str


_ESTIMATE_SCHEMA = """{
  "name": "Brief descriptive name of the meal/food",
  "description": "Detailed description of what you see",
  "calories": number,
  "protein": number,
  "carbs": number,
  "fat": number,
  "fiber": number,
  "sugar": number,
  "sodium": number,
  "confidence": number,
  "ingredients": ["list", "of", "main", "ingredients"],
  "servingSize": "description of portion size",
  "cookingMethod": "how the food appears to be prepared",
  "healthNotes": "brief health assessment or notes"
}"""


def _meal_schema(meal_timing: str) -> dict[str, object]:
    return {
        "name": "Meal Name",
        "description": "Brief description of the meal",
        "meal_timing": meal_timing,
        "dietary_category": "BALANCED",
        "prep_time_minutes": 15,
        "difficulty_level": 1,
        "calories": 400,
        "protein_g": 20,
        "carbs_g": 45,
        "fats_g": 15,
        "fiber_g": 8,
        "sugar_g": 10,
        "sodium_mg": 600,
        "ingredients": [
            {"name": "Oats", "quantity": 50, "unit": "g", "category": "Grains"}
        ],
        "instructions": [{"step": 1, "text": "Detailed cooking instruction"}],
        "allergens": [],
        "image_url": DEFAULT_MEAL_IMAGE_URL,
    }


def image_analysis_prompt(language: str, update_text: str | None = None) -> Prompt:
    """Build the prompt for estimating nutrition from a meal photo."""
    context = ""
    if update_text:
        context = (
            "\nADDITIONAL CONTEXT: The user provided this additional information: "
            f'"{update_text}". Please incorporate this into your analysis and '
            "adjust nutritional values accordingly.\n"
        )
    system = f"""You are a professional nutritionist and food analyst. Analyze the food image and provide detailed nutritional information.

IMPORTANT INSTRUCTIONS:
1. Analyze the food items visible in the image
2. Estimate portion sizes based on visual cues
3. Provide accurate nutritional values per serving shown
4. If multiple items, sum up the total nutrition
5. Be conservative with estimates - better to underestimate than overestimate
6. Consider cooking methods that affect nutrition
7. Account for added oils, sauces, and seasonings visible
{context}
Respond with a JSON object containing:
{_ESTIMATE_SCHEMA}

Language for response: {language}"""
    if update_text:
        user = f"Please analyze this food image. Additional context: {update_text}"
    else:
        user = (
            "Please analyze this food image and provide detailed nutritional "
            "information."
        )
    return Prompt(system=system, user=user)


def update_analysis_prompt(
    original: NutritionEstimate, update_text: str, language: str
) -> Prompt:
    """Build the prompt for revising an estimate with a user clarification."""
    original_json = json.dumps(original.to_prompt_json(), indent=2)
    system = f"""You are a professional nutritionist. The user has provided additional information about their meal. Update the nutritional analysis accordingly.

ORIGINAL ANALYSIS:
{original_json}

ADDITIONAL INFORMATION FROM USER:
"{update_text}"

Please provide an updated nutritional analysis that incorporates this new information. Adjust calories, macronutrients, and other values as needed.

Respond with a JSON object in the same format as the original analysis.

Language for response: {language}"""
    user = (
        "Please update the nutritional analysis based on this additional "
        f'information: "{update_text}"'
    )
    return Prompt(system=system, user=user)


def meal_plan_prompt(
    profile: UserNutritionProfile, timings: Sequence[MealTiming]
) -> Prompt:
    """Build the prompt for a seven-day meal plan."""
    example = {
        "weekly_plan": [
            {
                "day": "Sunday",
                "day_index": 0,
                "meals": [
                    {
                        **_meal_schema(timings[0].value),
                        "portion_multiplier": 1.0,
                        "is_optional": False,
                    }
                ],
            }
        ],
        "weekly_nutrition_summary": {
            "avg_daily_calories": 2000,
            "avg_daily_protein": 150,
            "avg_daily_carbs": 250,
            "avg_daily_fats": 67,
            "goal_adherence_percentage": 95,
        },
        "shopping_tips": [
            "Buy seasonal produce for better prices",
            "Prepare proteins in bulk on weekends",
        ],
        "meal_prep_suggestions": [
            "Cook grains in batches",
            "Pre-cut vegetables for quick assembly",
        ],
    }
    leftovers = "allowed" if profile.include_leftovers else "not wanted"
    meal_times = "fixed" if profile.fixed_meal_times else "flexible"
    timing_list = ", ".join(timings)
    equipment = join_names(profile.kitchen_equipment, empty="Basic kitchen")
    texture = profile.meal_texture_preference or "No preference"
    system = f"""You are a professional nutritionist and meal planning expert. Create a personalized 7-day meal plan based on the user's profile, preferences, and goals.

CRITICAL REQUIREMENTS:
1. Create exactly 7 days of meals (Sunday through Saturday), with day_index 0 for Sunday through 6 for Saturday
2. Each day should have exactly {profile.meals_per_day} meals and {profile.snacks_per_day} snacks
3. Use these meal timings, in this order: {timing_list}
4. All meals must meet the user's dietary restrictions and preferences
5. Avoid all excluded ingredients and allergens: {join_names(profile.excluded_ingredients)}
6. Avoid foods from avoided list: {join_names(profile.avoided_foods)}
7. Balance nutrition across the week to meet daily targets
8. Consider cooking skill level: {profile.cooking_skill_level}
9. Available cooking time: {profile.available_cooking_time}
10. Only use this kitchen equipment: {equipment}
11. Provide detailed recipes with ingredients and instructions
12. Include realistic prep times and difficulty levels
13. Suggest appropriate portion sizes
14. Ensure variety across the week, repeating meals at most every {profile.rotation_frequency_days} days
15. Leftovers are {leftovers}; meal times are {meal_times}

USER PROFILE:
- Age: {profile.age}
- Weight: {profile.weight_kg:g}kg
- Height: {profile.height_cm:g}cm
- Target daily calories: {profile.target_calories_daily:g}
- Target daily protein: {profile.target_protein_daily:g}g
- Target daily carbs: {profile.target_carbs_daily:g}g
- Target daily fats: {profile.target_fats_daily:g}g
- Dietary preferences: {join_names(profile.dietary_preferences)}
- Allergies: {join_names(profile.allergies)}
- Activity level: {profile.physical_activity_level}
- Sport frequency: {profile.sport_frequency}
- Main goal: {profile.main_goal}
- Meal texture preference: {texture}

You must respond with a valid JSON object in this exact format:
{json.dumps(example, indent=2)}"""
    user = (
        "Please create my personalized 7-day meal plan based on my profile and "
        "preferences. Make sure to include all 7 days with complete meal "
        "information."
    )
    return Prompt(system=system, user=user)


def replacement_meal_prompt(request: MealReplacementRequest) -> Prompt:
    """Build the prompt for a single replacement meal."""
    current = request.current_meal
    preferences = request.user_preferences
    targets = request.nutrition_targets
    example = {
        **_meal_schema(current.meal_timing.value),
        "prep_time_minutes": 20,
        "difficulty_level": 2,
        "replacement_reason": "Brief explanation of why this is a good replacement",
    }
    current_json = json.dumps(
        current.model_dump(mode="json", exclude_none=True), indent=2
    )
    category = preferences.preferred_dietary_category or "Any"
    max_prep = preferences.max_prep_time or "No limit"
    system = f"""You are a professional nutritionist. Generate a replacement meal that is similar to the current meal but meets the user's specific preferences and requirements.

CURRENT MEAL TO REPLACE:
{current_json}

USER PREFERENCES:
- Dietary preferences: {join_names(preferences.dietary_preferences)}
- Excluded ingredients: {join_names(preferences.excluded_ingredients)}
- Allergies: {join_names(preferences.allergies)}
- Preferred dietary category: {category}
- Max prep time: {max_prep} minutes

NUTRITION TARGETS:
- Target calories: {targets.target_calories:g}
- Target protein: {targets.target_protein:g}g

Keep the meal_timing "{current.meal_timing}".

Respond with a valid JSON object in this exact format:
{json.dumps(example, indent=2)}"""
    user = (
        "Please generate a suitable replacement meal based on my preferences "
        "and requirements."
    )
    return Prompt(system=system, user=user)


def insights_prompt(meals: Sequence[MealRecord], stats: NutritionStats) -> Prompt:
    """Build the prompt for short nutrition insights."""
    system = f"""You are a professional nutritionist. Analyze the user's meal data and statistics to provide personalized insights.

MEAL DATA SUMMARY:
- Total meals analyzed: {len(meals)}
- Average daily calories: {stats.average_calories_daily:g}
- Average daily protein: {stats.average_protein_daily:g}g
- Calorie goal achievement: {stats.calorie_goal_achievement_percent:g}%
- Processed food percentage: {stats.processed_food_percentage:g}%

Provide 3-5 personalized insights based on this data. Focus on:
1. Nutrition patterns and trends
2. Areas for improvement
3. Positive behaviors to reinforce
4. Specific actionable advice

Respond with a JSON array of insight strings."""
    user = "Please analyze my nutrition data and provide insights."
    return Prompt(system=system, user=user)
