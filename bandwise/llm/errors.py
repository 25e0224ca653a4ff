"""Exceptions raised at the generative-text service boundary."""

from __future__ import annotations

import enum
import typing as t

if t.TYPE_CHECKING:
    from bandwise.model import ExamModule


class LLMError(Exception):
    """Base error for generative-text operations."""

    pass


class RequestError(LLMError):
    """An external completion request failed, timed out or returned nothing usable."""

    def __init__(self, message: str, code: str, provider: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.provider = provider


class EnvelopeError(RequestError):
    """A provider response envelope did not contain generated text."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        super().__init__(message, "envelope", provider)


class RecoveryError(LLMError):
    """No recovery strategy could produce a structure from generated text."""

    def __init__(self, message: str, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class ContentValidationError(LLMError):
    """A recovered document does not have the shape its modules require."""

    def __init__(self, module: ExamModule, expectation: str) -> None:
        super().__init__(f"{module.value}: {expectation}")
        self.module = module
        self.expectation = expectation


class MissingModuleError(ContentValidationError):
    pass


class MalformedModuleError(ContentValidationError):
    pass


class GenerationStage(enum.Enum):
    Prompt = "prompt"
    Request = "request"
    Envelope = "envelope"
    Recovery = "recovery"
    Validation = "validation"


class GenerationError(LLMError):
    """Content synthesis failed; `stage` names where."""

    def __init__(self, stage: GenerationStage, message: str) -> None:
        super().__init__(f"generation failed at {stage.value} stage: {message}")
        self.stage = stage
