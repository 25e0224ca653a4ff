"""Tests for provider envelope adapters."""

from __future__ import annotations

import pytest

from bandwise.llm import EnvelopeError, ProviderType, unwrap_envelope


class TestUnwrapEnvelope(object):
    """Each provider's envelope yields its generated text."""

    def test_cohere_generations(self) -> None:
        data = {"id": "x", "generations": [{"id": "g", "text": '{"a": 1}'}]}
        assert unwrap_envelope(ProviderType.Cohere, data) == '{"a": 1}'

    def test_google_content_parts(self) -> None:
        data = {"candidates": [{"content": {"parts": [{"text": "part one "}, {"text": "part two"}]}}]}
        assert unwrap_envelope(ProviderType.Google, data) == "part one part two"

    def test_google_candidate_parts(self) -> None:
        """Some API versions put the parts directly on the candidate."""
        data = {"candidates": [{"parts": [{"text": "direct parts"}]}]}
        assert unwrap_envelope(ProviderType.Google, data) == "direct parts"

    def test_google_candidate_text(self) -> None:
        data = {"candidates": [{"text": "candidate text"}]}
        assert unwrap_envelope(ProviderType.Google, data) == "candidate text"

    def test_google_legacy_text(self) -> None:
        """The legacy API answers with a top-level text."""
        assert unwrap_envelope(ProviderType.Google, {"text": "legacy"}) == "legacy"

    def test_deepseek_chat_completion(self) -> None:
        data = {"choices": [{"index": 0, "message": {"role": "assistant", "content": "Band 6.5"}}]}
        assert unwrap_envelope(ProviderType.DeepSeek, data) == "Band 6.5"


class TestUnwrapEnvelopeErrors(object):
    """Unusable envelopes raise EnvelopeError."""

    def test_missing_generations(self) -> None:
        with pytest.raises(EnvelopeError) as exc_info:
            unwrap_envelope(ProviderType.Cohere, {"message": "rate limited"})
        assert exc_info.value.provider == "cohere"
        assert exc_info.value.code == "envelope"

    def test_empty_choices(self) -> None:
        with pytest.raises(EnvelopeError):
            unwrap_envelope(ProviderType.DeepSeek, {"choices": []})

    def test_not_an_object(self) -> None:
        with pytest.raises(EnvelopeError):
            unwrap_envelope(ProviderType.Google, ["not", "an", "object"])

    def test_text_is_not_a_string(self) -> None:
        with pytest.raises(EnvelopeError):
            unwrap_envelope(ProviderType.Cohere, {"generations": [{"text": 42}]})

    def test_chat_model_providers_have_no_adapter(self) -> None:
        """OpenAI and Anthropic are driven through chat models, not envelopes."""
        with pytest.raises(EnvelopeError):
            unwrap_envelope(ProviderType.OpenAI, {"choices": []})
