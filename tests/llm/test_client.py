"""Tests for the completion clients and their factory."""

from __future__ import annotations

import asyncio
import json
import typing as t

import httpx
import pydantic as p
import pytest
from langchain_core.language_models import FakeListChatModel

from bandwise.llm import ChatModelCompletionClient, EnvelopeError, ExamModels, HTTPCompletionClient, LLMSecrets, \
    LLMSettings, ModelFactory, ModelSettings, ProviderSecrets, ProviderType, RequestError


def http_client(settings: ModelSettings, handler: httpx.MockTransport | None = None) -> HTTPCompletionClient:
    return HTTPCompletionClient(settings, p.Secret("test-key"), transport=handler)


class TestHTTPCompletionClient(object):
    """Tests for the REST provider client."""

    def test_cohere_request_and_reply(self) -> None:
        """Cohere gets the system text prepended and a bearer token."""
        seen: dict[str, object] = {}

        def handle(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"generations": [{"text": "generated"}]})

        client = http_client(ModelSettings(provider=ProviderType.Cohere), httpx.MockTransport(handle))
        text = asyncio.run(client.complete("the prompt", system="the system"))

        assert text == "generated"
        assert seen["url"] == "https://api.cohere.ai/v1/generate"
        assert seen["auth"] == "Bearer test-key"
        body = seen["body"]
        assert isinstance(body, dict)
        assert body["prompt"] == "the system\n\nthe prompt"
        assert body["model"] == "command"

    def test_google_request_and_reply(self) -> None:
        """Google takes the model in the URL and the key in a header."""
        seen: dict[str, object] = {}

        def handle(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["key"] = request.headers["x-goog-api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "gemini says"}]}}]})

        settings = ModelSettings(provider=ProviderType.Google, model="gemini-test")
        text = asyncio.run(http_client(settings, httpx.MockTransport(handle)).complete("hi", system="be terse"))

        assert text == "gemini says"
        assert seen["path"] == "/v1beta/models/gemini-test:generateContent"
        assert seen["key"] == "test-key"
        body = seen["body"]
        assert isinstance(body, dict)
        assert body["systemInstruction"] == {"parts": [{"text": "be terse"}]}
        assert body["contents"] == [{"parts": [{"text": "hi"}]}]

    def test_deepseek_messages(self) -> None:
        seen: dict[str, object] = {}

        def handle(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]})

        settings = ModelSettings(provider=ProviderType.DeepSeek)
        assert asyncio.run(http_client(settings, httpx.MockTransport(handle)).complete("q", system="s")) == "ok"
        body = seen["body"]
        assert isinstance(body, dict)
        assert body["messages"] == [{"role": "system", "content": "s"}, {"role": "user", "content": "q"}]

    def test_timeout_is_request_error(self) -> None:
        def handle(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = http_client(ModelSettings(provider=ProviderType.Cohere), httpx.MockTransport(handle))
        with pytest.raises(RequestError) as exc_info:
            asyncio.run(client.complete("prompt"))
        assert exc_info.value.code == "timeout"
        assert exc_info.value.provider == "cohere"

    def test_http_error_status(self) -> None:
        def handle(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, json={"message": "unavailable"})

        client = http_client(ModelSettings(provider=ProviderType.Cohere), httpx.MockTransport(handle))
        with pytest.raises(RequestError) as exc_info:
            asyncio.run(client.complete("prompt"))
        assert exc_info.value.code == "http_status"

    def test_body_not_json(self) -> None:
        def handle(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        client = http_client(ModelSettings(provider=ProviderType.Cohere), httpx.MockTransport(handle))
        with pytest.raises(EnvelopeError):
            asyncio.run(client.complete("prompt"))

    def test_empty_completion(self) -> None:
        def handle(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"generations": [{"text": "   "}]})

        client = http_client(ModelSettings(provider=ProviderType.Cohere), httpx.MockTransport(handle))
        with pytest.raises(EnvelopeError):
            asyncio.run(client.complete("prompt"))

    def test_missing_key_fails_at_call_time(self) -> None:
        """A client without credentials can be built; its requests fail."""
        client = HTTPCompletionClient(ModelSettings(provider=ProviderType.Cohere), None)
        with pytest.raises(RequestError) as exc_info:
            asyncio.run(client.complete("prompt"))
        assert exc_info.value.code == "configuration"

    def test_rejects_chat_model_providers(self) -> None:
        with pytest.raises(ValueError):
            HTTPCompletionClient(ModelSettings(provider=ProviderType.OpenAI), None)


class TestChatModelCompletionClient(object):
    """Tests for the LangChain-backed client."""

    def test_returns_model_reply(self) -> None:
        client = ChatModelCompletionClient(model=FakeListChatModel(responses=["Band 7"]))
        assert asyncio.run(client.complete("prompt", system="system")) == "Band 7"

    def test_empty_reply(self) -> None:
        client = ChatModelCompletionClient(model=FakeListChatModel(responses=[""]))
        with pytest.raises(EnvelopeError):
            asyncio.run(client.complete("prompt"))

    def test_missing_key_fails_at_call_time(self) -> None:
        client = ChatModelCompletionClient(ModelSettings(provider=ProviderType.OpenAI), None)
        with pytest.raises(RequestError) as exc_info:
            asyncio.run(client.complete("prompt"))
        assert exc_info.value.code == "configuration"

    def test_requires_settings_or_model(self) -> None:
        with pytest.raises(ValueError):
            ChatModelCompletionClient()


class TestModelFactory(object):
    """Tests for the task-specific client factory."""

    def test_clients_follow_provider_kind(self) -> None:
        settings = LLMSettings(
            models=ExamModels(
                generation=ModelSettings(provider=ProviderType.Google),
                evaluation=ModelSettings(provider=ProviderType.Anthropic),
                feedback=ModelSettings(provider=ProviderType.DeepSeek),
            )
        )
        factory = ModelFactory(settings, LLMSecrets())

        assert isinstance(factory.create_generation_client(), HTTPCompletionClient)
        assert isinstance(factory.create_evaluation_client(), ChatModelCompletionClient)
        assert isinstance(factory.create_feedback_client(), HTTPCompletionClient)

    def test_generation_provider_override(self) -> None:
        """Another generation provider drops the configured model and endpoint."""
        settings = LLMSettings(
            models=ExamModels(generation=ModelSettings(provider=ProviderType.Cohere, model="command-r"))
        )
        secrets = LLMSecrets(google=ProviderSecrets(api_key=p.Secret("g-key")))
        client = ModelFactory(settings, secrets).create_generation_client(ProviderType.Google)

        assert isinstance(client, HTTPCompletionClient)
        assert client.provider is ProviderType.Google
        assert "gemini-1.5-pro" in client.endpoint

    def test_each_task_uses_its_own_settings(self) -> None:
        """Generation, evaluation and feedback clients are built from their own task settings."""
        settings = LLMSettings(
            models=ExamModels(
                generation=ModelSettings(provider=ProviderType.DeepSeek, endpoint="https://gen.example/{model}"),
                evaluation=ModelSettings(provider=ProviderType.DeepSeek, endpoint="https://eval.example/{model}"),
                feedback=ModelSettings(provider=ProviderType.DeepSeek, model="fb", endpoint="https://fb.example/{model}"),
            )
        )
        factory = ModelFactory(settings, LLMSecrets())

        clients = [
            factory.create_generation_client(),
            factory.create_evaluation_client(),
            factory.create_feedback_client(),
        ]
        assert [t.cast(HTTPCompletionClient, c).endpoint for c in clients] == [
            "https://gen.example/deepseek-chat",
            "https://eval.example/deepseek-chat",
            "https://fb.example/fb",
        ]
