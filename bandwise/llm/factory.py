"""Factory for the task-specific completion clients."""

from __future__ import annotations

import httpx

from .client import ChatModelCompletionClient, CompletionClient, HTTPCompletionClient
from .config import LLMSecrets, LLMSettings, ModelSettings
from .provider import ProviderType


class ModelFactory:
    """Factory for creating configured completion clients."""

    def __init__(
        self,
        settings: LLMSettings,
        secrets: LLMSecrets,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._secrets = secrets
        self._transport = transport

    def create_client(self, settings: ModelSettings) -> CompletionClient:
        """Create a completion client from model settings."""
        api_key = self._secrets.api_key(settings.provider)
        if settings.provider.is_chat_model:
            return ChatModelCompletionClient(settings, api_key)
        return HTTPCompletionClient(settings, api_key, transport=self._transport)

    def create_generation_client(self, provider: ProviderType | None = None) -> CompletionClient:
        """Create the client for exam content generation, optionally on another provider."""
        settings = self._settings.models.generation
        if provider is not None and provider is not settings.provider:
            # the configured model and endpoint belong to the configured provider
            settings = settings.model_copy(update={"provider": provider, "model": None, "endpoint": None})
        return self.create_client(settings)

    def create_evaluation_client(self) -> CompletionClient:
        """Create the client for band estimation of open-ended responses."""
        return self.create_client(self._settings.models.evaluation)

    def create_feedback_client(self) -> CompletionClient:
        """Create the client for feedback generation."""
        return self.create_client(self._settings.models.feedback)

