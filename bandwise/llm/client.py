"""Clients for the external generative-text service.

Every client exposes `complete(prompt, *, system=None) -> str` and raises
`RequestError` for anything that keeps it from returning generated text. Clients
never retry; callers decide what a failure degrades to.
"""

from __future__ import annotations

import logging
import typing as t
from abc import abstractmethod

import httpx
import pydantic as p
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from .config import ModelSettings
from .envelope import unwrap_envelope
from .errors import EnvelopeError, RequestError
from .provider import create_chat_model, ProviderType

logger = logging.getLogger(__name__)

DefaultEndpoints: dict[ProviderType, str] = {
    ProviderType.Cohere: "https://api.cohere.ai/v1/generate",
    ProviderType.Google: "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent",
    ProviderType.DeepSeek: "https://api.deepseek.com/v1/chat/completions",
}


class CompletionClient(t.Protocol):
    """Protocol for generative-text services."""

    @abstractmethod
    async def complete(self, prompt: str, *, system: str | None = None) -> str:
        """Request a completion for `prompt`.

        Args:
            prompt: The user prompt
            system: Optional system instruction

        Returns:
            The generated text, unwrapped from the provider's envelope

        Raises:
            RequestError: If the request fails, times out or yields no text
        """
        ...


class HTTPCompletionClient(object):
    """Completion client for providers reached over their REST APIs."""

    Providers = frozenset({ProviderType.Cohere, ProviderType.Google, ProviderType.DeepSeek})

    def __init__(
        self,
        settings: ModelSettings,
        api_key: p.Secret[str] | None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if settings.provider not in self.Providers:
            raise ValueError(f"{settings.provider.value} is not served over HTTP")
        self._settings = settings
        self._api_key = api_key
        self._transport = transport

    @property
    def provider(self) -> ProviderType:
        return self._settings.provider

    @property
    def endpoint(self) -> str:
        template = self._settings.endpoint or DefaultEndpoints[self.provider]
        return template.format(model=self._settings.model_name)

    def build_request(self, prompt: str, system: str | None, api_key: str) -> tuple[dict[str, str], dict[str, t.Any]]:
        """Build the headers and JSON body for this provider."""
        settings = self._settings
        headers = {"Content-Type": "application/json"}

        match self.provider:
            case ProviderType.Cohere:
                headers["Authorization"] = f"Bearer {api_key}"
                return headers, {
                    "model": settings.model_name,
                    "prompt": f"{system}\n\n{prompt}" if system else prompt,
                    "max_tokens": settings.max_tokens,
                    "temperature": settings.temperature,
                    "return_likelihoods": "NONE",
                }

            case ProviderType.Google:
                headers["x-goog-api-key"] = api_key
                body: dict[str, t.Any] = {
                    "contents": [{"parts": [{"text": prompt}]}],
                    "generationConfig": {
                        "temperature": settings.temperature,
                        "maxOutputTokens": settings.max_tokens,
                    },
                }
                if system:
                    body["systemInstruction"] = {"parts": [{"text": system}]}
                return headers, body

            case _:
                headers["Authorization"] = f"Bearer {api_key}"
                messages = [{"role": "system", "content": system}] if system else []
                messages.append({"role": "user", "content": prompt})
                return headers, {
                    "model": settings.model_name,
                    "messages": messages,
                    "temperature": settings.temperature,
                    "max_tokens": settings.max_tokens,
                }

    async def complete(self, prompt: str, *, system: str | None = None) -> str:
        provider = self.provider.value
        if self._api_key is None:
            raise RequestError(f"{provider} API key not configured", "configuration", provider)

        headers, body = self.build_request(prompt, system, self._api_key.get_secret_value())
        try:
            async with httpx.AsyncClient(timeout=self._settings.timeout_seconds, transport=self._transport) as client:
                response = await client.post(self.endpoint, headers=headers, json=body)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise RequestError(f"{provider} request timed out", "timeout", provider) from e
        except httpx.HTTPStatusError as e:
            raise RequestError(f"{provider} API error: HTTP {e.response.status_code}", "http_status", provider) from e
        except httpx.HTTPError as e:
            raise RequestError(f"{provider} request failed: {e}", "transport", provider) from e
        except ValueError as e:
            raise EnvelopeError(f"{provider} response body is not JSON", provider) from e

        text = unwrap_envelope(self.provider, data)
        if not text.strip():
            raise EnvelopeError(f"{provider} returned an empty completion", provider)

        logger.debug(
            "completion received",
            extra={"provider": provider, "model": self._settings.model_name, "characters": len(text)},
        )
        return text


class ChatModelCompletionClient(object):
    """Completion client backed by a LangChain chat model.

    The chat model is created on first use, so a missing API key surfaces as a
    `RequestError` from `complete()` rather than at construction time.
    """

    def __init__(
        self,
        settings: ModelSettings | None = None,
        api_key: p.Secret[str] | None = None,
        *,
        model: BaseChatModel | None = None,
    ) -> None:
        if settings is None and model is None:
            raise ValueError("either settings or model is required")
        self._settings = settings
        self._api_key = api_key
        self._model = model

    @property
    def provider(self) -> str | None:
        return self._settings.provider.value if self._settings is not None else None

    def _get_model(self) -> BaseChatModel:
        if self._model is not None:
            return self._model

        settings = t.cast(ModelSettings, self._settings)
        key = self._api_key.get_secret_value() if self._api_key is not None else None
        try:
            self._model = create_chat_model(settings, key)
        except ValueError as e:
            raise RequestError(str(e), "configuration", self.provider) from e
        return self._model

    async def complete(self, prompt: str, *, system: str | None = None) -> str:
        model = self._get_model()

        messages: list[BaseMessage] = [SystemMessage(content=system)] if system else []
        messages.append(HumanMessage(content=prompt))

        try:
            response = await model.ainvoke(messages)
        except Exception as e:
            raise RequestError(f"chat model request failed: {e}", "request", self.provider) from e

        text = get_content_str(response.content)
        if not text.strip():
            raise EnvelopeError("chat model returned an empty completion", self.provider)
        return text


def get_content_str(content: t.Any) -> str:
    """Extract string content from a LangChain message content field."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        content_list = t.cast(list[t.Any], content)
        parts: list[str] = []
        for item in content_list:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict) and isinstance(item.get("text"), str):
                parts.append(t.cast(str, item["text"]))
        return "".join(parts)
    return str(content)
