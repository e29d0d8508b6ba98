"""Nutrition analysis and meal planning backed by a completion model.

Every public coroutine is total: when no client is configured, the request
fails, or the reply cannot be parsed, the result comes from the deterministic
generators in ``meal_analysis.services.fallbacks`` and carries
``is_fallback=True``.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from meal_analysis.domain.meal_plan import (
    DAY_NAMES,
    MealTiming,
    WeeklyMealPlan,
    meal_timings,
)
from meal_analysis.domain.nutrition import NutritionEstimate, coerce_number
from meal_analysis.domain.profile import UserNutritionProfile
from meal_analysis.domain.replacement import (
    MealReplacementRequest,
    MealReplacementResult,
)
from meal_analysis.domain.stats import MealRecord, NutritionStats
from meal_analysis.services.completion import CompletionClient
from meal_analysis.services.fallbacks import (
    apply_update_heuristic,
    fallback_estimate,
    fallback_meal_plan,
    fallback_replacement,
)
from meal_analysis.services.parsing import (
    MalformedResponseError,
    extract_json_object,
    parse_insights,
)
from meal_analysis.services.prompts import (
    Prompt,
    image_analysis_prompt,
    insights_prompt,
    meal_plan_prompt,
    replacement_meal_prompt,
    update_analysis_prompt,
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestOptions:
    """Output budget and sampling temperature for one kind of request."""

    max_tokens: int
    temperature: float


IMAGE_ANALYSIS_OPTIONS = RequestOptions(max_tokens=1000, temperature=0.1)
UPDATE_ANALYSIS_OPTIONS = RequestOptions(max_tokens=800, temperature=0.1)
MEAL_PLAN_OPTIONS = RequestOptions(max_tokens=4000, temperature=0.3)
REPLACEMENT_OPTIONS = RequestOptions(max_tokens=1500, temperature=0.4)
INSIGHTS_OPTIONS = RequestOptions(max_tokens=500, temperature=0.3)

_NUMERIC_ESTIMATE_KEYS = {
    "calories",
    "protein",
    "carbs",
    "fat",
    "fiber",
    "sugar",
    "sodium",
    "confidence",
}
_FALLBACK_FLAG_KEYS = ("is_fallback", "isFallback")


@dataclass
class AnalysisService:
    """Service that prompts the model and validates or replaces its replies."""

    client: CompletionClient | None
    model: str = "gpt-4o"
    default_language: str = "english"

    @property
    def is_live(self) -> bool:
        """Whether requests go to the model rather than straight to fallbacks."""
        return self.client is not None

    async def analyze_image(
        self,
        image_bytes: bytes,
        language: str | None = None,
        update_text: str | None = None,
    ) -> NutritionEstimate:
        """Estimate nutrition for a meal photo."""
        if self.client is None:
            _logger.info("No OpenAI credentials configured, using fallback analysis")
            return fallback_estimate(image_bytes, update_text)
        if not image_bytes:
            _logger.warning("Empty image payload, using fallback analysis")
            return fallback_estimate(image_bytes, update_text)

        prompt = image_analysis_prompt(language or self.default_language, update_text)
        try:
            reply = await self._complete(
                self.client,
                prompt,
                IMAGE_ANALYSIS_OPTIONS,
                image=image_bytes,
            )
        except Exception:
            _logger.exception("Meal image analysis request failed")
            return fallback_estimate(image_bytes, update_text)

        try:
            return NutritionEstimate.model_validate(
                _without_fallback_flag(extract_json_object(reply))
            )
        except ValueError:
            _logger.warning("Could not parse meal analysis reply", exc_info=True)
            return fallback_estimate(image_bytes, update_text)

    async def update_analysis(
        self,
        original: NutritionEstimate,
        update_text: str,
        language: str | None = None,
    ) -> NutritionEstimate:
        """Revise an estimate with a clarification, keeping fields the model omits."""
        if self.client is None:
            _logger.info("No OpenAI credentials configured, using fallback update")
            return apply_update_heuristic(original, update_text)

        prompt = update_analysis_prompt(
            original, update_text, language or self.default_language
        )
        try:
            reply = await self._complete(self.client, prompt, UPDATE_ANALYSIS_OPTIONS)
        except Exception:
            _logger.exception("Meal analysis update request failed")
            return apply_update_heuristic(original, update_text)

        try:
            return _merge_estimate(original, extract_json_object(reply))
        except ValueError:
            _logger.warning("Could not parse meal update reply", exc_info=True)
            return apply_update_heuristic(original, update_text)

    async def generate_meal_plan(self, profile: UserNutritionProfile) -> WeeklyMealPlan:
        """Generate a seven-day meal plan for the profile."""
        if self.client is None:
            _logger.info("No OpenAI credentials configured, using fallback meal plan")
            return fallback_meal_plan(profile)

        timings = meal_timings(profile.meals_per_day, profile.snacks_per_day)
        prompt = meal_plan_prompt(profile, timings)
        try:
            reply = await self._complete(self.client, prompt, MEAL_PLAN_OPTIONS)
        except Exception:
            _logger.exception("Meal plan request failed")
            return fallback_meal_plan(profile)

        try:
            plan = _parse_meal_plan(reply, timings)
        except ValueError:
            _logger.warning("Could not parse meal plan reply", exc_info=True)
            return fallback_meal_plan(profile)
        _logger.info("Meal plan generated and validated")
        return plan

    async def generate_replacement_meal(
        self, request: MealReplacementRequest
    ) -> MealReplacementResult:
        """Generate one meal to replace the current meal in the same slot."""
        if self.client is None:
            _logger.info("No OpenAI credentials configured, using fallback replacement")
            return fallback_replacement(request)

        prompt = replacement_meal_prompt(request)
        try:
            reply = await self._complete(self.client, prompt, REPLACEMENT_OPTIONS)
        except Exception:
            _logger.exception("Replacement meal request failed")
            return fallback_replacement(request)

        try:
            return _parse_replacement(reply)
        except ValueError:
            _logger.warning("Could not parse replacement meal reply", exc_info=True)
            return fallback_replacement(request)

    async def generate_insights(
        self, meals: Sequence[MealRecord], stats: NutritionStats
    ) -> list[str]:
        """Return a few short insights, or an empty list when none can be produced."""
        if self.client is None:
            _logger.info("No OpenAI credentials configured, skipping insights")
            return []

        prompt = insights_prompt(meals, stats)
        try:
            reply = await self._complete(self.client, prompt, INSIGHTS_OPTIONS)
        except Exception:
            _logger.exception("Nutrition insights request failed")
            return []

        try:
            return parse_insights(reply)
        except ValueError:
            _logger.warning("Could not parse nutrition insights reply", exc_info=True)
            return []

    async def _complete(
        self,
        client: CompletionClient,
        prompt: Prompt,
        options: RequestOptions,
        image: bytes | None = None,
    ) -> str:
        reply = await client.complete(
            model=self.model,
            system_prompt=prompt.system,
            user_text=prompt.user,
            max_tokens=options.max_tokens,
            temperature=options.temperature,
            image=image,
        )
        _logger.debug("Model reply: %s", reply)
        return reply


def _without_fallback_flag(payload: dict[str, object]) -> dict[str, object]:
    return {
        key: value for key, value in payload.items() if key not in _FALLBACK_FLAG_KEYS
    }


def _estimate_key(key: str) -> str | None:
    """Map a field name or alias onto the key used by ``to_prompt_json``."""
    for name, info in NutritionEstimate.model_fields.items():
        if name == "is_fallback":
            continue
        alias = info.alias or name
        if key in {name, alias}:
            return alias
    return None


def _is_present(key: str, value: object) -> bool:
    if value is None:
        return False
    if key in _NUMERIC_ESTIMATE_KEYS:
        return coerce_number(value) is not None
    if key == "ingredients":
        return isinstance(value, list)
    return isinstance(value, str) and bool(value.strip())


def _merge_estimate(
    original: NutritionEstimate, payload: dict[str, object]
) -> NutritionEstimate:
    merged = original.to_prompt_json()
    for key, value in payload.items():
        target = _estimate_key(key)
        if target is not None and _is_present(target, value):
            merged[target] = value
    return NutritionEstimate.model_validate(merged)


def _parse_meal_plan(reply: str, timings: Sequence[MealTiming]) -> WeeklyMealPlan:
    payload = extract_json_object(reply)
    days = payload.get("weekly_plan")
    if not isinstance(days, list):
        raise MalformedResponseError(
            "Invalid meal plan structure: missing weekly_plan array"
        )
    if len(days) != len(DAY_NAMES):
        raise MalformedResponseError(f"Expected 7 days, got {len(days)}")

    plan = WeeklyMealPlan.model_validate(_without_fallback_flag(payload))
    allowed = set(timings)
    for index, day in enumerate(plan.weekly_plan):
        if day.day_index != index:
            raise MalformedResponseError(
                f"Expected day_index {index}, got {day.day_index}"
            )
        if len(day.meals) != len(timings):
            raise MalformedResponseError(
                f"Expected {len(timings)} meals on {day.day}, got {len(day.meals)}"
            )
        unexpected = {meal.meal_timing for meal in day.meals} - allowed
        if unexpected:
            raise MalformedResponseError(
                f"Unexpected meal timings on {day.day}: {sorted(unexpected)}"
            )
    return plan


def _parse_replacement(reply: str) -> MealReplacementResult:
    payload = extract_json_object(reply)
    name = payload.get("name")
    timing = payload.get("meal_timing")
    if not (isinstance(name, str) and name.strip()) or not (
        isinstance(timing, str) and timing.strip()
    ):
        raise MalformedResponseError("Missing required fields in replacement meal")
    return MealReplacementResult.model_validate(_without_fallback_flag(payload))
