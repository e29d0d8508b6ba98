"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

_PLACEHOLDER_API_KEYS = {
    "changeme",
    "sk-...",
    "sk-xxx",
    "your-api-key",
    "your-openai-api-key",
    "your_openai_api_key",
    "your_openai_api_key_here",
    "your-openai-api-key-here",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    openai_base_url: str | None = None
    openai_timeout_seconds: float = 60.0
    default_language: str = "english"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_openai_api_key(raw: str | None) -> str | None:
    """Return a usable OpenAI API key, or None for missing and placeholder values."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if not cleaned:
        return None
    if cleaned.lower() in _PLACEHOLDER_API_KEYS:
        return None
    return cleaned
