"""LLM provider implementations.

Provides a unified interface for Anthropic (direct) and OpenRouter (free tier)
so the insight layer doesn't need to know which backend answers a query.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import anthropic
import openai

if TYPE_CHECKING:
    from dataloom.config import Settings

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

_ERROR_PREFIX = "I encountered an error while analyzing your data. "


class InsightError(RuntimeError):
    """Raised when the LLM backend fails; the message is safe to show users."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def friendly_error(status_code: int | None) -> str:
    """Return a user-facing message for a failed completion.

    Args:
        status_code: HTTP status reported by the backend, if any

    Returns:
        Message that never exposes provider internals
    """
    if status_code == 404:
        return _ERROR_PREFIX + "The AI model is currently unavailable. Please try again later."
    if status_code == 429:
        return _ERROR_PREFIX + "Too many requests. Please wait a moment and try again."
    if status_code in (401, 403):
        return (
            _ERROR_PREFIX
            + "API key validation failed. Please check your API key configuration."
        )
    return _ERROR_PREFIX + "Please try rephrasing your question or try again later."


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    name: str = "llm"

    def __init__(self, model: str) -> None:
        self.model = model

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        system_prompt: str,
        max_tokens: int = 4096,
    ) -> str:
        """Send a single-turn prompt and return the text of the reply.

        Raises:
            InsightError: If the backend call fails
        """
        ...  # pragma: no cover


class AnthropicProvider(LLMProvider):
    """Provider using the Anthropic API directly."""

    name = "anthropic"

    def __init__(self, api_key: str, model: str) -> None:
        super().__init__(model)
        self.client = anthropic.AsyncAnthropic(api_key=api_key)

    async def complete(
        self,
        prompt: str,
        system_prompt: str,
        max_tokens: int = 4096,
    ) -> str:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                system=system_prompt,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as e:
            logger.exception(f"Anthropic API error (status {e.status_code})")
            raise InsightError(friendly_error(e.status_code), e.status_code) from e
        except anthropic.APIError as e:
            logger.exception("Anthropic API error")
            raise InsightError(friendly_error(None)) from e

        return "".join(
            block.text for block in response.content if hasattr(block, "text")
        )


class OpenRouterProvider(LLMProvider):
    """Provider using OpenRouter's OpenAI-compatible API (free tier)."""

    name = "openrouter"

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        is_shared_key: bool = False,
    ) -> None:
        super().__init__(model)
        self.client = openai.AsyncOpenAI(
            base_url=OPENROUTER_BASE_URL,
            api_key=api_key,
            default_headers={"X-Title": "DataLoom"},
        )
        self.is_shared_key = is_shared_key

    async def complete(
        self,
        prompt: str,
        system_prompt: str,
        max_tokens: int = 4096,
    ) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max_tokens,
            )
        except openai.APIStatusError as e:
            logger.exception(
                f"OpenRouter API error (status {e.status_code}, shared key: {self.is_shared_key})"
            )
            raise InsightError(friendly_error(e.status_code), e.status_code) from e
        except openai.APIError as e:
            logger.exception("OpenRouter API error")
            raise InsightError(friendly_error(None)) from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


def get_provider(api_key: str | None, settings: Settings) -> LLMProvider:
    """Create the appropriate LLM provider based on available credentials.

    Priority: user API key (detected by prefix) -> server Anthropic key
    -> server OpenRouter key (shared free tier).

    Raises:
        ValueError: If the key format is unknown or no provider is configured
    """
    if api_key:
        if api_key.startswith("sk-ant-"):
            return AnthropicProvider(api_key, settings.anthropic_model)
        if api_key.startswith("sk-or-"):
            return OpenRouterProvider(api_key, settings.openrouter_model)
        raise ValueError(
            "Unrecognized API key format. "
            "Anthropic keys start with 'sk-ant-', OpenRouter keys start with 'sk-or-'."
        )
    if settings.anthropic_api_key:
        return AnthropicProvider(settings.anthropic_api_key, settings.anthropic_model)
    if settings.openrouter_api_key:
        return OpenRouterProvider(
            settings.openrouter_api_key,
            settings.openrouter_model,
            is_shared_key=True,
        )
    raise ValueError("No LLM provider configured")
