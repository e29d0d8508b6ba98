"""Tests for stats service."""

from datetime import UTC, datetime

from meal_analysis.domain.stats import MealRecord
from meal_analysis.services.stats import StatsService


def test_summarize_averages_by_day(meals) -> None:
    stats = StatsService().summarize(meals, calorie_goal=2000)

    assert stats.average_calories_daily == 1150
    assert stats.average_protein_daily == 62.5
    assert stats.calorie_goal_achievement_percent == 50
    assert stats.processed_food_percentage == 50


def test_daily_totals_respect_timezone() -> None:
    late = datetime(2026, 3, 2, 23, 30, tzinfo=UTC)
    meals = [
        MealRecord("Late snack", late, 200, 5, 20, 10),
        MealRecord("Dinner", datetime(2026, 3, 2, 10, tzinfo=UTC), 600, 40, 50, 20),
    ]

    utc_days = StatsService().daily_totals(meals)
    tokyo_days = StatsService(timezone_name="Asia/Tokyo").daily_totals(meals)

    assert [day.calories for day in utc_days] == [800]
    assert [day.calories for day in tokyo_days] == [600, 200]


def test_summarize_without_meals_is_zero() -> None:
    stats = StatsService().summarize([], calorie_goal=2000)

    assert stats.average_calories_daily == 0
    assert stats.calorie_goal_achievement_percent == 0
    assert stats.processed_food_percentage == 0
