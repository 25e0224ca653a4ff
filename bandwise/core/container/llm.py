"""LLM container for dependency injection."""

from __future__ import annotations

import typing as t

import httpx
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Object, Provider, Singleton

from bandwise.llm import CompletionClient, LLMSecrets, LLMSettings, ModelFactory


def provide_settings(config: dict[str, t.Any] | None) -> LLMSettings:
    return LLMSettings.model_validate(config or {})


def provide_secrets(secrets: dict[str, t.Any] | None) -> LLMSecrets:
    # providers without credentials fail at call time, not at boot
    return LLMSecrets.model_validate(secrets or {})


class LLMContainer(DeclarativeContainer):
    """Container for the completion clients."""

    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    # tests swap in an httpx.MockTransport here
    transport: Provider[httpx.AsyncBaseTransport | None] = Object(None)

    settings: Provider[LLMSettings] = Singleton(provide_settings, config)
    llm_secrets: Provider[LLMSecrets] = Singleton(provide_secrets, secrets)
    factory: Provider[ModelFactory] = Singleton(ModelFactory, settings=settings, secrets=llm_secrets, transport=transport)

    generation_client: Provider[CompletionClient] = factory.provided.create_generation_client.call()
    evaluation_client: Provider[CompletionClient] = factory.provided.create_evaluation_client.call()
    feedback_client: Provider[CompletionClient] = factory.provided.create_feedback_client.call()
