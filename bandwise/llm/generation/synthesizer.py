"""Exam content synthesis: prompt, request, recovery and validation."""

from __future__ import annotations

import logging
import typing as t

import jinja2

from bandwise.llm.client import CompletionClient
from bandwise.llm.config import RecoverySettings
from bandwise.llm.errors import ContentValidationError, EnvelopeError, GenerationError, GenerationStage, \
    RecoveryError, RequestError
from bandwise.llm.prompt import build_generation_prompt, GENERATION_SYSTEM
from bandwise.llm.recovery import recover
from bandwise.model import ExamDocument, ExamModule, ExamVariant

from .validator import validate_document

logger = logging.getLogger(__name__)

ModuleSelection = t.Mapping[ExamModule | str, bool] | t.Iterable[ExamModule | str]


def requested_modules(selection: ModuleSelection) -> list[ExamModule]:
    """Normalize a module selection into modules in canonical order.

    Accepts either a mapping of module to inclusion flag or an iterable of
    modules; modules may be given by value.
    """
    if isinstance(selection, t.Mapping):
        flags = t.cast(t.Mapping[ExamModule | str, bool], selection)
        chosen = [m for m, included in flags.items() if included]
    else:
        chosen = list(selection)
    wanted = {ExamModule(m) if isinstance(m, str) else m for m in chosen}
    return [m for m in ExamModule if m in wanted]


class ContentSynthesizer:
    """Produces a validated exam document from the generative-text service.

    Nothing is retried here; a caller wanting another attempt calls
    `synthesize` again.
    """

    def __init__(
        self,
        client: CompletionClient,
        env: jinja2.Environment,
        settings: RecoverySettings | None = None,
    ) -> None:
        self._client = client
        self._env = env
        self._settings = settings or RecoverySettings()

    async def synthesize(self, variant: ExamVariant, modules: ModuleSelection) -> ExamDocument:
        """Generate an exam containing exactly the requested modules.

        Raises:
            GenerationError: Naming the failed stage, with the cause chained
        """
        try:
            requested = requested_modules(modules)
            prompt = build_generation_prompt(self._env, variant, requested)
        except (ValueError, jinja2.TemplateError) as e:
            raise GenerationError(GenerationStage.Prompt, str(e)) from e

        try:
            text = await self._client.complete(prompt, system=GENERATION_SYSTEM)
        except EnvelopeError as e:
            raise GenerationError(GenerationStage.Envelope, str(e)) from e
        except RequestError as e:
            raise GenerationError(GenerationStage.Request, str(e)) from e

        try:
            candidate = recover(text, self._settings)
        except RecoveryError as e:
            logger.warning("generated content could not be recovered", extra={"characters": len(text)})
            raise GenerationError(GenerationStage.Recovery, str(e)) from e

        try:
            document = validate_document(candidate, requested)
        except ContentValidationError as e:
            raise GenerationError(GenerationStage.Validation, str(e)) from e

        logger.info(
            f"synthesized {variant.title} exam",
            extra={"modules": [m.value for m in document.modules]},
        )
        return document
