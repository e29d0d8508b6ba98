"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from meal_analysis.adapters.openai_chat_client import OpenAIChatClient
from meal_analysis.config import Settings, resolve_openai_api_key
from meal_analysis.services.analysis import AnalysisService
from meal_analysis.services.stats import StatsService

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analysis_service: AnalysisService
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    api_key = resolve_openai_api_key(resolved_settings.openai_api_key)
    openai_client: OpenAIChatClient | None = None
    if api_key is None:
        _logger.warning("OpenAI API key missing, analysis will use fallback data")
    else:
        openai_client = OpenAIChatClient.create(
            api_key,
            base_url=resolved_settings.openai_base_url,
            timeout_seconds=resolved_settings.openai_timeout_seconds,
        )
    analysis_service = AnalysisService(
        client=openai_client,
        model=resolved_settings.openai_model,
        default_language=resolved_settings.default_language,
    )

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        analysis_service=analysis_service,
        stats_service=StatsService(),
        close_resources=close_resources,
    )
