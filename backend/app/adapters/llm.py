"""OpenAI-compatible chat completion client."""

import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from backend.app.config import get_openai_api_key, get_settings

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    """Raised when the completion API fails or returns no text."""


def _create_client() -> AsyncOpenAI:
    """Create async client against the configured base URL."""
    settings = get_settings()
    return AsyncOpenAI(
        api_key=get_openai_api_key(),
        base_url=settings.openai_base_url,
        timeout=settings.llm_timeout_s,
        max_retries=0,
        default_headers={
            "HTTP-Referer": settings.ui_origin,
            "X-Title": "Kolkata Explorer",
        },
    )


async def complete(
    messages: list[dict[str, Any]],
    model: str | None = None,
    temperature: float = 0.7,
    max_tokens: int = 1024,
) -> str:
    """Run one chat completion and return the assistant text.

    Args:
        messages: OpenAI-format messages ({"role", "content"})
        model: Model name; defaults to settings.openai_model
        temperature: Sampling temperature
        max_tokens: Output token cap

    Returns:
        Non-empty completion text

    Raises:
        MissingOpenAIKeyError: If no API key is configured
        LLMError: If the API call fails or the response carries no text
    """
    client = _create_client()
    model = model or get_settings().openai_model

    try:
        response = await client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    except OpenAIError as e:
        logger.warning("Completion request to %s failed: %s", model, e)
        raise LLMError(f"Completion request failed: {e}") from e

    content = response.choices[0].message.content if response.choices else None
    if not content or not content.strip():
        logger.warning("Completion from %s returned no text", model)
        raise LLMError("Empty response from completion API")

    return content
