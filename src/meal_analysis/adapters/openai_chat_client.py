"""OpenAI chat completions client for multimodal prompts."""

import base64
from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from meal_analysis.services.completion import CompletionClient

# (offset, signature, mime type); unknown images are sent as JPEG.
_IMAGE_SIGNATURES = (
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (8, b"WEBP", "image/webp"),
)
_DEFAULT_IMAGE_MIME = "image/jpeg"


def image_mime_type(image: bytes) -> str:
    """Sniff the MIME type the vision endpoint should be told about."""
    for offset, signature, mime_type in _IMAGE_SIGNATURES:
        if image[offset : offset + len(signature)] == signature:
            return mime_type
    return _DEFAULT_IMAGE_MIME


def image_data_url(image: bytes) -> str:
    encoded = base64.b64encode(image).decode("ascii")
    return f"data:{image_mime_type(image)};base64,{encoded}"


@dataclass
class OpenAIChatClient(CompletionClient):
    """Completion client backed by the OpenAI chat completions API."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: str | None = None,
        timeout_seconds: float = 60.0,
    ) -> "OpenAIChatClient":
        """Create an OpenAI client with a managed httpx session and no retries."""
        http_client = httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                http_client=http_client,
                max_retries=0,
            )
        )

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
        """Send one chat completion request and return the reply text."""
        user_content: str | list[dict[str, object]] = user_text
        if image:
            user_content = [
                {"type": "text", "text": user_text},
                {
                    "type": "image_url",
                    "image_url": {"url": image_data_url(image), "detail": "high"},
                },
            ]
        response = await self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise RuntimeError("OpenAI returned an empty response")
        return content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
