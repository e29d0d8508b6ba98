"""Domain models for meal statistics."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class MealRecord:
    """Summary data for a logged meal."""

    name: str
    logged_at: datetime
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    is_processed: bool = False


@dataclass(frozen=True)
class DailyTotals:
    """Daily total macros."""

    day: date
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class NutritionStats:
    """Aggregate figures the insight prompt is built from."""

    average_calories_daily: float
    average_protein_daily: float
    calorie_goal_achievement_percent: float
    processed_food_percentage: float
