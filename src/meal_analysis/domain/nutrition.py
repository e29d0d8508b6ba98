"""Nutrition estimate models and numeric coercion helpers."""

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN_FOOD_NAME = "Unknown Food"
DEFAULT_CONFIDENCE = 75.0


def coerce_number(value: object) -> float | None:
    """Return a finite float for numeric input, or None when it is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def non_negative(value: object, default: float = 0.0) -> float:
    """Coerce a value to a non-negative float, using a default for non-numbers."""
    number = coerce_number(value)
    if number is None:
        return default
    return max(0.0, number)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded away from zero."""
    return int(math.floor(value + 0.5))


def coerce_text(value: object, default: str) -> str:
    """Return a stripped string, or the default for blank and non-string values."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def coerce_string_list(value: object) -> list[str]:
    """Keep strings (and stringified numbers) from a list, dropping everything else."""
    if not isinstance(value, list | tuple):
        return []
    items: list[str] = []
    for item in value:
        if isinstance(item, str):
            if item.strip():
                items.append(item.strip())
        elif isinstance(item, int | float) and not isinstance(item, bool):
            items.append(str(item))
    return items


class NutritionEstimate(BaseModel):
    """Nutrition estimate for a single meal photo."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = UNKNOWN_FOOD_NAME
    description: str | None = None
    calories: float = Field(default=0.0, ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    fiber: float | None = Field(default=None, ge=0)
    sugar: float | None = Field(default=None, ge=0)
    sodium: float | None = Field(default=None, ge=0)
    confidence: float = Field(default=DEFAULT_CONFIDENCE, ge=0, le=100)
    ingredients: list[str] = Field(default_factory=list)
    serving_size: str = Field(default="1 serving", alias="servingSize")
    cooking_method: str = Field(default="Unknown", alias="cookingMethod")
    health_notes: str = Field(default="", alias="healthNotes")
    is_fallback: bool = Field(default=False, alias="isFallback")

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: object) -> str:
        return coerce_text(value, UNKNOWN_FOOD_NAME)

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value: object) -> str | None:
        if isinstance(value, str):
            return value
        return None

    @field_validator("calories", "protein", "carbs", "fat", mode="before")
    @classmethod
    def _coerce_macro(cls, value: object) -> float:
        return non_negative(value)

    @field_validator("fiber", "sugar", "sodium", mode="before")
    @classmethod
    def _coerce_micro(cls, value: object) -> float | None:
        number = coerce_number(value)
        if number is None:
            return None
        return max(0.0, number)

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: object) -> float:
        number = coerce_number(value)
        if number is None:
            return DEFAULT_CONFIDENCE
        return min(100.0, max(0.0, number))

    @field_validator("ingredients", mode="before")
    @classmethod
    def _coerce_ingredients(cls, value: object) -> list[str]:
        return coerce_string_list(value)

    @field_validator("serving_size", mode="before")
    @classmethod
    def _coerce_serving_size(cls, value: object) -> str:
        return coerce_text(value, "1 serving")

    @field_validator("cooking_method", mode="before")
    @classmethod
    def _coerce_cooking_method(cls, value: object) -> str:
        return coerce_text(value, "Unknown")

    @field_validator("health_notes", mode="before")
    @classmethod
    def _coerce_health_notes(cls, value: object) -> str:
        return value if isinstance(value, str) else ""

    def to_prompt_json(self) -> dict[str, object]:
        """Serialize with the camelCase keys used in model prompts."""
        return self.model_dump(by_alias=True, exclude={"is_fallback"})
