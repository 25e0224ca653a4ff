"""Generative-text providers and the LangChain chat models behind some of them."""

from __future__ import annotations

import enum
import typing as t

from langchain_core.language_models import BaseChatModel
from pydantic import SecretStr

if t.TYPE_CHECKING:
    from .config import ModelSettings


class ProviderType(enum.Enum):
    """Supported generative-text providers.

    Cohere, Google and DeepSeek are reached over their REST APIs and answer with
    provider-specific envelopes; OpenAI and Anthropic are driven through
    LangChain chat models.
    """

    Cohere = "cohere"
    Google = "google"
    DeepSeek = "deepseek"
    OpenAI = "openai"
    Anthropic = "anthropic"

    @property
    def is_chat_model(self) -> bool:
        return self in (ProviderType.OpenAI, ProviderType.Anthropic)


def create_chat_model(settings: ModelSettings, api_key: str | None) -> BaseChatModel:
    """Build the chat model for an OpenAI or Anthropic model configuration.

    Raises:
        ValueError: If the key is missing or the provider is not served by a
            chat model
    """
    provider = settings.provider
    if not provider.is_chat_model:
        raise ValueError(f"{provider.value} is not served through a chat model")
    if api_key is None:
        raise ValueError(f"{provider.value} API key not configured")

    if provider is ProviderType.OpenAI:
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=settings.model_name,
            temperature=settings.temperature,
            max_completion_tokens=settings.max_tokens,
            timeout=settings.timeout_seconds,
            max_retries=settings.max_retries,
            api_key=SecretStr(api_key),
        )

    from langchain_anthropic import ChatAnthropic

    return ChatAnthropic(
        model_name=settings.model_name,
        temperature=settings.temperature,
        max_tokens_to_sample=settings.max_tokens,
        timeout=settings.timeout_seconds,
        max_retries=settings.max_retries,
        api_key=SecretStr(api_key),
        stop=None,
    )
