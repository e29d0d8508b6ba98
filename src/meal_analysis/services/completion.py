"""Outbound port for the hosted completion model."""

from typing import Protocol


class CompletionClient(Protocol):
    """Interface for a chat completion call that returns the model's text."""

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        system_prompt: str,
        user_text: str,
        max_tokens: int,
        temperature: float,
        image: bytes | None = None,
    ) -> str:
        """Return the raw text of the model reply."""
