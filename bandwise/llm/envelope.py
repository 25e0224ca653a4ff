"""Adapters that pull generated text out of provider response envelopes."""

from __future__ import annotations

import typing as t

from .errors import EnvelopeError
from .provider import ProviderType

Envelope = t.Mapping[str, t.Any]


def unwrap_generations(data: Envelope) -> str:
    """Cohere generate: `{"generations": [{"text": ...}]}`."""
    return data["generations"][0]["text"]


def unwrap_candidates(data: Envelope) -> str:
    """Google generateContent.

    The text sits in `candidates[0].content.parts`, in `candidates[0].parts` on
    some API versions, directly in `candidates[0].text`, or in a top-level
    `text` on the legacy API.
    """
    candidates = data.get("candidates")
    if not candidates:
        return data["text"]

    candidate = candidates[0]
    if "content" in candidate and "parts" in candidate["content"]:
        parts = candidate["content"]["parts"]
    elif "parts" in candidate:
        parts = candidate["parts"]
    else:
        return candidate["text"]
    return "".join(part["text"] for part in parts if "text" in part)


def unwrap_chat_completion(data: Envelope) -> str:
    """OpenAI-compatible chat completions: `choices[0].message.content`."""
    return data["choices"][0]["message"]["content"]


EnvelopeAdapters: dict[ProviderType, t.Callable[[Envelope], str]] = {
    ProviderType.Cohere: unwrap_generations,
    ProviderType.Google: unwrap_candidates,
    ProviderType.DeepSeek: unwrap_chat_completion,
}


def unwrap_envelope(provider: ProviderType, data: t.Any) -> str:
    """Return the generated text of a provider response.

    Raises:
        EnvelopeError: if the provider has no adapter or the envelope does not
            have the shape the adapter expects
    """
    adapter = EnvelopeAdapters.get(provider)
    if adapter is None:
        raise EnvelopeError(f"no envelope adapter for {provider.value}", provider.value)
    if not isinstance(data, t.Mapping):
        raise EnvelopeError(f"{provider.value} response is not a JSON object", provider.value)

    try:
        text = adapter(t.cast(Envelope, data))
    except (KeyError, IndexError, TypeError) as e:
        raise EnvelopeError(f"unexpected {provider.value} response envelope", provider.value) from e

    if not isinstance(text, str):
        raise EnvelopeError(f"{provider.value} response text is not a string", provider.value)
    return text
