"""Weekly meal plan models."""

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

from meal_analysis.domain.nutrition import (
    coerce_number,
    coerce_string_list,
    coerce_text,
    non_negative,
    round_half_up,
)

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)
DEFAULT_DIETARY_CATEGORY = "BALANCED"
DEFAULT_INGREDIENT_CATEGORY = "Other"
UNTITLED_MEAL_NAME = "Untitled Meal"
DEFAULT_MEAL_IMAGE_URL = (
    "https://images.pexels.com/photos/1640777/pexels-photo-1640777.jpeg"
)
MAX_DIFFICULTY = 5


class MealTiming(StrEnum):
    """Meal slot within a day."""

    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"
    MORNING_SNACK = "MORNING_SNACK"
    AFTERNOON_SNACK = "AFTERNOON_SNACK"
    EVENING_SNACK = "EVENING_SNACK"

    @classmethod
    def normalize(cls, value: object) -> object:
        """Map loose spellings like ``"morning snack"`` onto tag values."""
        if isinstance(value, str):
            return value.strip().upper().replace(" ", "_").replace("-", "_")
        return value


_MEAL_SLOTS = (MealTiming.BREAKFAST, MealTiming.LUNCH, MealTiming.DINNER)
_SNACK_SLOTS = (
    MealTiming.MORNING_SNACK,
    MealTiming.AFTERNOON_SNACK,
    MealTiming.EVENING_SNACK,
)


def meal_timings(meals_per_day: int, snacks_per_day: int) -> list[MealTiming]:
    """Return the ordered timing tags for a day with the given slot counts."""
    meals = _MEAL_SLOTS[: max(0, meals_per_day)]
    snacks = _SNACK_SLOTS[: max(0, snacks_per_day)]
    return [*meals, *snacks]


class Ingredient(BaseModel):
    """Recipe ingredient with quantity."""

    name: str
    quantity: float = Field(default=0.0, ge=0)
    unit: str = ""
    category: str = DEFAULT_INGREDIENT_CATEGORY

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: object) -> float:
        return non_negative(value)

    @field_validator("unit", mode="before")
    @classmethod
    def _coerce_unit(cls, value: object) -> str:
        return coerce_text(value, "")

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: object) -> str:
        return coerce_text(value, DEFAULT_INGREDIENT_CATEGORY)


class InstructionStep(BaseModel):
    """Numbered recipe step."""

    step: int = Field(ge=1)
    text: str


def _coerce_ingredients(value: object) -> object:
    if not isinstance(value, list):
        return []
    ingredients: list[object] = []
    for item in value:
        if isinstance(item, str):
            if item.strip():
                ingredients.append({"name": item.strip()})
        elif isinstance(item, dict) and coerce_text(item.get("name"), ""):
            ingredients.append({**item, "name": item["name"].strip()})
    return ingredients


def _coerce_instructions(value: object) -> object:
    if not isinstance(value, list):
        return []
    steps: list[dict[str, object]] = []
    for item in value:
        if isinstance(item, str):
            text = item
        elif isinstance(item, dict) and isinstance(item.get("text"), str):
            text = item["text"]
        else:
            continue
        if text.strip():
            steps.append({"step": len(steps) + 1, "text": text.strip()})
    return steps


class PlannedMeal(BaseModel):
    """A single meal inside a plan, with recipe and nutrition breakdown."""

    name: str = UNTITLED_MEAL_NAME
    description: str = ""
    meal_timing: MealTiming
    dietary_category: str = DEFAULT_DIETARY_CATEGORY
    prep_time_minutes: int = Field(default=15, ge=0)
    difficulty_level: int = Field(default=1, ge=1, le=MAX_DIFFICULTY)
    calories: float = Field(default=0.0, ge=0)
    protein_g: float = Field(default=0.0, ge=0)
    carbs_g: float = Field(default=0.0, ge=0)
    fats_g: float = Field(default=0.0, ge=0)
    fiber_g: float = Field(default=0.0, ge=0)
    sugar_g: float = Field(default=0.0, ge=0)
    sodium_mg: float = Field(default=0.0, ge=0)
    ingredients: list[Ingredient] = Field(default_factory=list)
    instructions: list[InstructionStep] = Field(default_factory=list)
    allergens: list[str] = Field(default_factory=list)
    image_url: str = DEFAULT_MEAL_IMAGE_URL
    portion_multiplier: float = Field(default=1.0, gt=0)
    is_optional: bool = False

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: object) -> str:
        return coerce_text(value, UNTITLED_MEAL_NAME)

    @field_validator("meal_timing", mode="before")
    @classmethod
    def _normalize_timing(cls, value: object) -> object:
        return MealTiming.normalize(value)

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value: object) -> str:
        return value if isinstance(value, str) else ""

    @field_validator("dietary_category", mode="before")
    @classmethod
    def _coerce_category(cls, value: object) -> str:
        return coerce_text(value, DEFAULT_DIETARY_CATEGORY).upper()

    @field_validator("prep_time_minutes", mode="before")
    @classmethod
    def _coerce_prep_time(cls, value: object) -> int:
        return round_half_up(non_negative(value, default=15))

    @field_validator("difficulty_level", mode="before")
    @classmethod
    def _coerce_difficulty(cls, value: object) -> int:
        number = coerce_number(value)
        if number is None:
            return 1
        return min(MAX_DIFFICULTY, max(1, round_half_up(number)))

    @field_validator(
        "calories",
        "protein_g",
        "carbs_g",
        "fats_g",
        "fiber_g",
        "sugar_g",
        "sodium_mg",
        mode="before",
    )
    @classmethod
    def _coerce_nutrient(cls, value: object) -> float:
        return non_negative(value)

    @field_validator("ingredients", mode="before")
    @classmethod
    def _coerce_ingredient_list(cls, value: object) -> object:
        return _coerce_ingredients(value)

    @field_validator("instructions", mode="before")
    @classmethod
    def _coerce_instruction_list(cls, value: object) -> object:
        return _coerce_instructions(value)

    @field_validator("allergens", mode="before")
    @classmethod
    def _coerce_allergens(cls, value: object) -> list[str]:
        return coerce_string_list(value)

    @field_validator("image_url", mode="before")
    @classmethod
    def _coerce_image_url(cls, value: object) -> str:
        return coerce_text(value, DEFAULT_MEAL_IMAGE_URL)

    @field_validator("portion_multiplier", mode="before")
    @classmethod
    def _coerce_portion(cls, value: object) -> float:
        number = coerce_number(value)
        if number is None or number <= 0:
            return 1.0
        return number

    @field_validator("is_optional", mode="before")
    @classmethod
    def _coerce_optional(cls, value: object) -> bool:
        return value is True


class DayPlan(BaseModel):
    """Meals planned for one day of the week (Sunday is index 0)."""

    day: str
    day_index: int = Field(ge=0, le=6)
    meals: list[PlannedMeal]

    @model_validator(mode="before")
    @classmethod
    def _default_day_name(cls, data: object) -> object:
        if not isinstance(data, dict) or coerce_text(data.get("day"), ""):
            return data
        index = coerce_number(data.get("day_index"))
        if index is None or not index.is_integer() or not 0 <= index < len(DAY_NAMES):
            return data
        return {**data, "day": DAY_NAMES[int(index)]}


class WeeklySummary(BaseModel):
    """Average daily nutrition across the plan."""

    avg_daily_calories: float = Field(default=0.0, ge=0)
    avg_daily_protein: float = Field(default=0.0, ge=0)
    avg_daily_carbs: float = Field(default=0.0, ge=0)
    avg_daily_fats: float = Field(default=0.0, ge=0)
    goal_adherence_percentage: float = Field(default=0.0, ge=0, le=100)

    @field_validator(
        "avg_daily_calories",
        "avg_daily_protein",
        "avg_daily_carbs",
        "avg_daily_fats",
        mode="before",
    )
    @classmethod
    def _coerce_average(cls, value: object) -> float:
        return non_negative(value)

    @field_validator("goal_adherence_percentage", mode="before")
    @classmethod
    def _coerce_adherence(cls, value: object) -> float:
        return min(100.0, non_negative(value))


class WeeklyMealPlan(BaseModel):
    """Seven-day meal plan with summary and tips."""

    weekly_plan: list[DayPlan]
    weekly_nutrition_summary: WeeklySummary = Field(default_factory=WeeklySummary)
    shopping_tips: list[str] = Field(default_factory=list)
    meal_prep_suggestions: list[str] = Field(default_factory=list)
    is_fallback: bool = False

    @field_validator("weekly_nutrition_summary", mode="before")
    @classmethod
    def _coerce_summary(cls, value: object) -> object:
        return value if isinstance(value, dict | WeeklySummary) else {}

    @field_validator("shopping_tips", "meal_prep_suggestions", mode="before")
    @classmethod
    def _coerce_tips(cls, value: object) -> list[str]:
        return coerce_string_list(value)
