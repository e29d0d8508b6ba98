"""Single-meal replacement request and result models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from meal_analysis.domain.meal_plan import (
    DEFAULT_DIETARY_CATEGORY,
    MealTiming,
    PlannedMeal,
)
from meal_analysis.domain.profile import Allergy, coerce_allergies


class CurrentMeal(BaseModel):
    """The planned meal the user wants swapped out."""

    model_config = ConfigDict(frozen=True)

    name: str
    meal_timing: MealTiming
    dietary_category: str = DEFAULT_DIETARY_CATEGORY
    calories: float | None = Field(default=None, ge=0)
    protein_g: float | None = Field(default=None, ge=0)
    carbs_g: float | None = Field(default=None, ge=0)
    fats_g: float | None = Field(default=None, ge=0)

    @field_validator("meal_timing", mode="before")
    @classmethod
    def _normalize_timing(cls, value: object) -> object:
        return MealTiming.normalize(value)


class ReplacementPreferences(BaseModel):
    """User constraints the replacement must respect."""

    model_config = ConfigDict(frozen=True)

    dietary_preferences: frozenset[str] = frozenset()
    excluded_ingredients: frozenset[str] = frozenset()
    allergies: tuple[Allergy, ...] = ()
    preferred_dietary_category: str | None = None
    max_prep_time: int | None = Field(default=None, gt=0)

    @field_validator("allergies", mode="before")
    @classmethod
    def _coerce_allergies(cls, value: object) -> object:
        return coerce_allergies(value)


class NutritionTargets(BaseModel):
    """Per-meal nutrition targets for the replacement."""

    model_config = ConfigDict(frozen=True)

    target_calories: float = Field(ge=0)
    target_protein: float = Field(ge=0)


class MealReplacementRequest(BaseModel):
    """Everything needed to propose a replacement meal."""

    model_config = ConfigDict(frozen=True)

    current_meal: CurrentMeal
    user_preferences: ReplacementPreferences = Field(
        default_factory=ReplacementPreferences
    )
    nutrition_targets: NutritionTargets


class MealReplacementResult(PlannedMeal):
    """A replacement meal and the reason it was chosen."""

    replacement_reason: str = ""
    is_fallback: bool = False

    @field_validator("replacement_reason", mode="before")
    @classmethod
    def _coerce_reason(cls, value: object) -> str:
        return value if isinstance(value, str) else ""
