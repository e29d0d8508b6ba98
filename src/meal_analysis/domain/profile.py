"""User profile inputs for meal planning."""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Allergy(BaseModel):
    """Single allergy entry."""

    model_config = ConfigDict(frozen=True)

    name: str
    severity: str | None = None


def coerce_allergies(value: object) -> object:
    """Accept bare allergy names alongside ``{"name": ...}`` objects."""
    if not isinstance(value, list | tuple):
        return value
    allergies: list[object] = []
    for item in value:
        if isinstance(item, str):
            if item.strip():
                allergies.append({"name": item.strip()})
        else:
            allergies.append(item)
    return allergies


def coerce_names(value: object) -> object:
    """Flatten ``{"name": ...}`` objects to plain names."""
    if not isinstance(value, list | tuple | set | frozenset):
        return value
    names: list[str] = []
    for item in value:
        if isinstance(item, dict):
            item = item.get("name")
        if isinstance(item, str) and item.strip():
            names.append(item.strip())
    return names


def join_names(values: Iterable[object], empty: str = "None") -> str:
    """Render a collection of names (or allergies) for a prompt line."""
    if isinstance(values, set | frozenset):
        values = sorted(values, key=str)
    names = [
        item.name if isinstance(item, Allergy) else str(item) for item in values
    ]
    return ", ".join(names) if names else empty


class UserNutritionProfile(BaseModel):
    """Profile, targets and constraints used to build a weekly meal plan."""

    model_config = ConfigDict(frozen=True)

    age: int = Field(gt=0)
    weight_kg: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    target_calories_daily: float = Field(ge=0)
    target_protein_daily: float = Field(ge=0)
    target_carbs_daily: float = Field(ge=0)
    target_fats_daily: float = Field(ge=0)
    meals_per_day: int = Field(default=3, ge=1, le=3)
    snacks_per_day: int = Field(default=0, ge=0, le=3)
    rotation_frequency_days: int = Field(default=7, ge=1)
    include_leftovers: bool = False
    fixed_meal_times: bool = False
    dietary_preferences: frozenset[str] = frozenset()
    excluded_ingredients: frozenset[str] = frozenset()
    allergies: tuple[Allergy, ...] = ()
    avoided_foods: tuple[str, ...] = ()
    physical_activity_level: str = "MODERATE"
    sport_frequency: str = "NONE"
    main_goal: str = "MAINTAIN"
    meal_texture_preference: str | None = None
    cooking_skill_level: str = "BEGINNER"
    available_cooking_time: str = "30 minutes"
    kitchen_equipment: tuple[str, ...] = ()

    @field_validator("allergies", mode="before")
    @classmethod
    def _coerce_allergies(cls, value: object) -> object:
        return coerce_allergies(value)

    @field_validator("avoided_foods", mode="before")
    @classmethod
    def _coerce_avoided_foods(cls, value: object) -> object:
        return coerce_names(value)

    @property
    def slots_per_day(self) -> int:
        """Total meal and snack slots in one day."""
        return self.meals_per_day + self.snacks_per_day
