"""Statistics over logged meals, used as input for nutrition insights."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from zoneinfo import ZoneInfo

from meal_analysis.domain.stats import DailyTotals, MealRecord, NutritionStats


@dataclass
class StatsService:
    """Service for aggregating meal records by day in a timezone."""

    timezone_name: str = "UTC"
    goal_tolerance: float = 0.1

    def daily_totals(self, meals: Sequence[MealRecord]) -> list[DailyTotals]:
        """Return per-day totals, oldest day first."""
        tz = ZoneInfo(self.timezone_name)
        days = sorted({meal.logged_at.astimezone(tz).date() for meal in meals})
        return [_aggregate_day(day, meals, tz) for day in days]

    def summarize(
        self, meals: Sequence[MealRecord], calorie_goal: float
    ) -> NutritionStats:
        """Summarize meals into averages, goal achievement and processed share."""
        daily = self.daily_totals(meals)
        total_days = max(len(daily), 1)
        total_calories = sum(entry.calories for entry in daily)
        total_protein = sum(entry.protein_g for entry in daily)

        achieved = 0
        if calorie_goal > 0:
            allowed = calorie_goal * self.goal_tolerance
            achieved = sum(
                1 for entry in daily if abs(entry.calories - calorie_goal) <= allowed
            )

        processed = sum(1 for meal in meals if meal.is_processed)
        return NutritionStats(
            average_calories_daily=round(total_calories / total_days, 1),
            average_protein_daily=round(total_protein / total_days, 1),
            calorie_goal_achievement_percent=round(100 * achieved / total_days, 1),
            processed_food_percentage=round(100 * processed / max(len(meals), 1), 1),
        )


def _aggregate_day(
    day: date, meals: Sequence[MealRecord], tz: ZoneInfo
) -> DailyTotals:
    total = DailyTotals(day=day, calories=0, protein_g=0, carbs_g=0, fat_g=0)
    for meal in meals:
        if meal.logged_at.astimezone(tz).date() != day:
            continue
        total = DailyTotals(
            day=day,
            calories=total.calories + meal.calories,
            protein_g=total.protein_g + meal.protein_g,
            carbs_g=total.carbs_g + meal.carbs_g,
            fat_g=total.fat_g + meal.fat_g,
        )
    return total
