"""Command line entry point for running analyses against local files."""

import argparse
import asyncio
import json
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, TypeAdapter

from meal_analysis.app_logging import configure_logging
from meal_analysis.config import Settings
from meal_analysis.containers import AppContainer, build_container
from meal_analysis.domain.nutrition import NutritionEstimate
from meal_analysis.domain.profile import UserNutritionProfile
from meal_analysis.domain.replacement import MealReplacementRequest
from meal_analysis.domain.stats import MealRecord
from meal_analysis.services.stats import StatsService

_MEAL_RECORDS = TypeAdapter(list[MealRecord])


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``meal-analysis`` command."""
    parser = argparse.ArgumentParser(
        prog="meal-analysis",
        description="Meal Analysis: nutrition estimates and meal plans.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    analyze = commands.add_parser("analyze", help="Estimate nutrition for a photo")
    analyze.add_argument("image", type=Path)
    analyze.add_argument("--language")
    analyze.add_argument("--note", help="Extra context about the meal")

    update = commands.add_parser("update", help="Revise a saved estimate")
    update.add_argument("estimate", type=Path, help="Estimate JSON file")
    update.add_argument("note")
    update.add_argument("--language")

    plan = commands.add_parser("plan", help="Generate a weekly meal plan")
    plan.add_argument("profile", type=Path, help="Profile JSON file")

    replace = commands.add_parser("replace", help="Generate a replacement meal")
    replace.add_argument("request", type=Path, help="Replacement request JSON file")

    insights = commands.add_parser("insights", help="Summarize logged meals")
    insights.add_argument("meals", type=Path, help="Meal log JSON file")
    insights.add_argument("--calorie-goal", type=float, default=2000.0)
    insights.add_argument("--timezone", default="UTC")
    return parser


async def _run(
    container: AppContainer, args: argparse.Namespace
) -> BaseModel | list[str]:
    service = container.analysis_service
    try:
        if args.command == "analyze":
            return await service.analyze_image(
                args.image.read_bytes(), args.language, args.note
            )
        if args.command == "update":
            original = NutritionEstimate.model_validate(_read_json(args.estimate))
            return await service.update_analysis(original, args.note, args.language)
        if args.command == "plan":
            profile = UserNutritionProfile.model_validate(_read_json(args.profile))
            return await service.generate_meal_plan(profile)
        if args.command == "insights":
            meals = _MEAL_RECORDS.validate_python(_read_json(args.meals))
            stats = StatsService(timezone_name=args.timezone).summarize(
                meals, calorie_goal=args.calorie_goal
            )
            return await service.generate_insights(meals, stats)
        request = MealReplacementRequest.model_validate(_read_json(args.request))
        return await service.generate_replacement_meal(request)
    finally:
        await container.close_resources()


def _read_json(path: Path) -> object:
    return json.loads(path.read_text(encoding="utf-8"))


def main(argv: Sequence[str] | None = None, settings: Settings | None = None) -> None:
    """Run one analysis command and print the result as JSON."""
    args = build_parser().parse_args(argv)
    configure_logging()
    container = build_container(settings)
    result = asyncio.run(_run(container, args))
    if isinstance(result, BaseModel):
        print(result.model_dump_json(indent=2, by_alias=True))
    else:
        print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
