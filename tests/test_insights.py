"""Tests for nutrition insights."""

import asyncio

from meal_analysis.services.analysis import AnalysisService
from meal_analysis.services.stats import StatsService
from tests.conftest import make_service


def test_insights_without_client_are_empty(meals) -> None:
    service = AnalysisService(client=None)
    stats = StatsService().summarize(meals, calorie_goal=2000)

    assert asyncio.run(service.generate_insights(meals, stats)) == []


def test_insights_parse_json_array(meals) -> None:
    reply = '["Protein is on target", "Swap toast for oats", "Fewer burgers"]'
    service, client = make_service(reply)
    stats = StatsService().summarize(meals, calorie_goal=2000)

    insights = asyncio.run(service.generate_insights(meals, stats))

    assert insights == ["Protein is on target", "Swap toast for oats", "Fewer burgers"]
    call = client.calls[0]
    assert call["max_tokens"] == 500
    assert call["temperature"] == 0.3
    prompt = str(call["system_prompt"])
    assert "Total meals analyzed: 4" in prompt
    assert "Average daily calories: 1150" in prompt
    assert "Calorie goal achievement: 50%" in prompt
    assert "Processed food percentage: 50%" in prompt


def test_insights_parse_line_delimited_reply(meals) -> None:
    service, _ = make_service("1. Drink more water\n2. Add a vegetable to lunch")
    stats = StatsService().summarize(meals, calorie_goal=2000)

    insights = asyncio.run(service.generate_insights(meals, stats))

    assert insights == ["Drink more water", "Add a vegetable to lunch"]


def test_insights_are_empty_on_error(meals) -> None:
    service, _ = make_service(error=RuntimeError("quota exceeded"))
    stats = StatsService().summarize(meals, calorie_goal=2000)

    assert asyncio.run(service.generate_insights(meals, stats)) == []


def test_insights_are_empty_for_blank_reply(meals) -> None:
    service, _ = make_service("   ")
    stats = StatsService().summarize(meals, calorie_goal=2000)

    assert asyncio.run(service.generate_insights(meals, stats)) == []


def test_insights_are_empty_for_deeply_nested_reply(meals) -> None:
    service, _ = make_service("[" * 100_000 + "]" * 100_000)
    stats = StatsService().summarize(meals, calorie_goal=2000)

    assert asyncio.run(service.generate_insights(meals, stats)) == []
