"""Evaluation pipeline orchestrator."""

from __future__ import annotations

import logging
import typing as t

import jinja2

from bandwise.llm.client import CompletionClient
from bandwise.model import AnswerMap, EvaluationResult, ExamDocument, ExamModule, ExamVariant, FeedbackBundle, \
    ModuleFeedback, ModuleScores, OverallFeedback, WritingTaskKind

from . import bank
from .config import ScoringSettings
from .feedback import generate_module_feedback, generate_overall_feedback, generate_writing_feedback
from .objective import tally_module
from .subjective import estimate_speaking_band, estimate_writing_band, evaluate_speaking, evaluate_writing, \
    split_speaking_responses

logger = logging.getLogger(__name__)


class EvaluationPipeline:
    """Scores an exam attempt and synthesizes feedback for it.

    The pipeline:
    1. Tallies reading and listening answers against the canonical answers
    2. Requests band estimates for writing and speaking, falling back to
       word-count heuristics
    3. Requests feedback for every scored module, falling back to static
       feedback per module and tier
    4. Requests the overall summary and study plan

    External calls are awaited one at a time in module order. The pipeline
    never raises for a failed or unusable external call.
    """

    def __init__(
        self,
        evaluation_client: CompletionClient,
        feedback_client: CompletionClient,
        env: jinja2.Environment,
        settings: ScoringSettings | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            evaluation_client: Client for band estimation of open-ended responses
            feedback_client: Client for feedback generation
            env: Jinja2 environment for prompt templates
            settings: Band table, heuristics and fallback bands
        """
        self._evaluation_client = evaluation_client
        self._feedback_client = feedback_client
        self._env = env
        self._settings = settings or ScoringSettings()

    async def evaluate(self, document: ExamDocument, answers: AnswerMap, variant: ExamVariant) -> EvaluationResult:
        scores = await self.score(document, answers, variant)
        feedback = await self.synthesize_feedback(scores, document, answers, variant)
        logger.info(
            "evaluated attempt",
            extra={"scores": {m.value: band for m, band in scores.present().items()}, "overall": scores.overall},
        )
        return EvaluationResult(scores=scores, feedback=feedback)

    async def score(self, document: ExamDocument, answers: AnswerMap, variant: ExamVariant) -> ModuleScores:
        bands: dict[str, float] = {}
        for module in document.modules:
            band = await self._score_module(module, document, answers, variant)
            if band is not None:
                bands[module.value] = band
        return ModuleScores(**bands)

    async def _score_module(
        self, module: ExamModule, document: ExamDocument, answers: AnswerMap, variant: ExamVariant
    ) -> float | None:
        settings = self._settings
        responses = t.cast(t.Mapping[str, str], answers.for_module(module) or {})

        if module is ExamModule.Reading or module is ExamModule.Listening:
            content = document.reading if module is ExamModule.Reading else document.listening
            assert content is not None
            return tally_module(content, answers.for_module(module), settings)["band"]

        try:
            if module is ExamModule.Writing:
                result = await evaluate_writing(
                    document.writing, responses, variant, self._evaluation_client, self._env, settings
                )
            else:
                result = await evaluate_speaking(
                    document.speaking, responses, variant, self._evaluation_client, self._env, settings
                )
            return result["band"]
        except Exception:
            logger.exception(f"{module.value} evaluation failed, using heuristic")

        if module is ExamModule.Writing:
            return estimate_writing_band(responses, settings)
        transcripts, recordings = split_speaking_responses(responses, settings)
        return estimate_speaking_band(transcripts, recordings, settings)

    async def synthesize_feedback(
        self, scores: ModuleScores, document: ExamDocument, answers: AnswerMap, variant: ExamVariant
    ) -> FeedbackBundle:
        settings = self._settings
        modules: dict[str, ModuleFeedback] = {}

        writing = t.cast(t.Mapping[str, str], answers.writing or {})
        for module, band in scores.present().items():
            try:
                if module is ExamModule.Writing:
                    feedback = await generate_writing_feedback(
                        band,
                        document.writing,
                        writing,
                        variant,
                        self._feedback_client,
                        self._env,
                        settings,
                    )
                else:
                    feedback = await generate_module_feedback(
                        module, band, variant, self._feedback_client, self._env, settings
                    )
            except Exception:
                logger.exception(f"{module.value} feedback failed, using static feedback")
                if module is ExamModule.Writing:
                    answered = [kind for kind in WritingTaskKind if writing.get(kind.value, "").strip()]
                    feedback = bank.writing_feedback(band, answered, settings.high_band, settings.low_band)
                else:
                    feedback = bank.module_feedback(module, band, settings.high_band, settings.low_band)
            modules[module.value] = feedback

        overall: OverallFeedback | None = None
        try:
            overall = await generate_overall_feedback(scores, self._feedback_client, self._env)
        except Exception:
            logger.exception("overall feedback failed, using static summary")
        if overall is None and scores.overall is not None:
            overall = bank.overall_feedback(scores.overall)

        return FeedbackBundle(**modules, overall=overall)
