"""Tests for container wiring."""

import asyncio

from meal_analysis.adapters.openai_chat_client import OpenAIChatClient
from meal_analysis.config import Settings
from meal_analysis.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert isinstance(container.analysis_service.client, OpenAIChatClient)
    assert container.analysis_service.model == "gpt-4o"
    assert container.stats_service is not None
    asyncio.run(container.close_resources())


def test_build_container_without_key_uses_fallbacks() -> None:
    container = build_container(
        Settings(_env_file=None, openai_api_key="your-openai-api-key")
    )

    assert container.analysis_service.client is None
    assert container.analysis_service.is_live is False
    asyncio.run(container.close_resources())
