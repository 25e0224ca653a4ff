"""Tests for exam content synthesis."""

from __future__ import annotations

import asyncio
import json
import typing as t
from unittest.mock import MagicMock

import jinja2
import pytest

from bandwise.llm import EnvelopeError, GenerationError, GenerationStage, RecoverySettings, RequestError
from bandwise.llm.generation import ContentSynthesizer, requested_modules
from bandwise.llm.prompt import GENERATION_SYSTEM
from bandwise.model import ExamModule, ExamVariant


class TestRequestedModules(object):
    """Tests for module selection normalization."""

    def test_mapping_of_flags(self) -> None:
        selection = {"reading": True, "listening": False, "writing": False, "speaking": True}
        assert requested_modules(selection) == [ExamModule.Reading, ExamModule.Speaking]

    def test_iterable_in_canonical_order(self) -> None:
        assert requested_modules([ExamModule.Writing, "listening"]) == [ExamModule.Listening, ExamModule.Writing]

    def test_unknown_module(self) -> None:
        with pytest.raises(ValueError):
            requested_modules(["grammar"])


class TestContentSynthesizer(object):
    """Tests for the synthesis pipeline."""

    def test_reading_only_document(
        self,
        llm_env: jinja2.Environment,
        scripted: t.Callable[..., MagicMock],
        reading_body: dict[str, t.Any],
    ) -> None:
        """A reply with a thirteen-question passage yields a reading-only document."""
        client = scripted(json.dumps({"reading": reading_body}))
        synthesizer = ContentSynthesizer(client, llm_env)
        selection = {"reading": True, "listening": False, "writing": False, "speaking": False}

        document = asyncio.run(synthesizer.synthesize(ExamVariant.Academic, selection))

        assert document.modules == (ExamModule.Reading,)
        assert document.reading is not None
        assert [q.id for q in document.reading.iter_questions()] == list(range(1, 14))
        assert document.listening is None and document.writing is None and document.speaking is None

        prompt = client.complete.await_args.args[0]
        assert "with the following modules: Reading." in prompt
        assert client.complete.await_args.kwargs["system"] == GENERATION_SYSTEM

    def test_recovers_fenced_reply_and_drops_extra_modules(
        self,
        llm_env: jinja2.Environment,
        scripted: t.Callable[..., MagicMock],
        reading_body: dict[str, t.Any],
        writing_body: dict[str, t.Any],
    ) -> None:
        reply = (
            "Sure! Here is the test you asked for:\n```json\n"
            + json.dumps({"reading": reading_body, "writing": writing_body}, indent=2)
            + "\n```"
        )
        synthesizer = ContentSynthesizer(scripted(reply), llm_env)
        document = asyncio.run(synthesizer.synthesize(ExamVariant.General, [ExamModule.Reading]))

        assert document.modules == (ExamModule.Reading,)

    def test_request_failure(self, llm_env: jinja2.Environment, scripted: t.Callable[..., MagicMock]) -> None:
        cause = RequestError("cohere request timed out", "timeout", "cohere")
        synthesizer = ContentSynthesizer(scripted(cause), llm_env)

        with pytest.raises(GenerationError) as exc_info:
            asyncio.run(synthesizer.synthesize(ExamVariant.Academic, [ExamModule.Reading]))
        assert exc_info.value.stage is GenerationStage.Request
        assert exc_info.value.__cause__ is cause

    def test_envelope_failure(self, llm_env: jinja2.Environment, scripted: t.Callable[..., MagicMock]) -> None:
        synthesizer = ContentSynthesizer(scripted(EnvelopeError("no text", "cohere")), llm_env)

        with pytest.raises(GenerationError) as exc_info:
            asyncio.run(synthesizer.synthesize(ExamVariant.Academic, [ExamModule.Reading]))
        assert exc_info.value.stage is GenerationStage.Envelope

    def test_recovery_failure(self, llm_env: jinja2.Environment, scripted: t.Callable[..., MagicMock]) -> None:
        synthesizer = ContentSynthesizer(scripted("I am unable to produce that test."), llm_env)

        with pytest.raises(GenerationError) as exc_info:
            asyncio.run(synthesizer.synthesize(ExamVariant.Academic, [ExamModule.Reading]))
        assert exc_info.value.stage is GenerationStage.Recovery

    def test_salvaged_document_missing_a_module_is_rejected(
        self,
        llm_env: jinja2.Environment,
        scripted: t.Callable[..., MagicMock],
        reading_body: dict[str, t.Any],
    ) -> None:
        """Truncated output recovers reading, but writing was requested too."""
        reply = '{"reading": ' + json.dumps(reading_body) + ', "writing": {"tasks": [{"type": "task1", "instru'
        synthesizer = ContentSynthesizer(scripted(reply), llm_env)

        with pytest.raises(GenerationError) as exc_info:
            asyncio.run(synthesizer.synthesize(ExamVariant.Academic, [ExamModule.Reading, ExamModule.Writing]))
        assert exc_info.value.stage is GenerationStage.Validation
        assert "writing" in str(exc_info.value)

    def test_prompt_failure(self, llm_env: jinja2.Environment, scripted: t.Callable[..., MagicMock]) -> None:
        client = scripted()
        synthesizer = ContentSynthesizer(client, llm_env, RecoverySettings())

        with pytest.raises(GenerationError) as exc_info:
            asyncio.run(synthesizer.synthesize(ExamVariant.Academic, {"reading": False}))
        assert exc_info.value.stage is GenerationStage.Prompt
        client.complete.assert_not_awaited()
