"""Scores and feedback returned by evaluation."""

from __future__ import annotations

import typing as t

import pydantic as p

from .base import FrozenModel
from .enum import ExamModule, FeedbackSource

BandScore = t.Annotated[float, p.Field(ge=0, le=9, multiple_of=0.5)]


class ModuleScores(FrozenModel):
    reading: BandScore | None = None
    listening: BandScore | None = None
    writing: BandScore | None = None
    speaking: BandScore | None = None

    @p.computed_field  # type: ignore[prop-decorator]
    @property
    def overall(self) -> float | None:
        from bandwise.llm.evaluation.band import overall_band

        return overall_band(self.present().values())

    def present(self) -> dict[ExamModule, float]:
        return {m: score for m in ExamModule if (score := getattr(self, m.value)) is not None}


class ModuleFeedback(FrozenModel):
    strengths: tuple[str, ...]
    weaknesses: tuple[str, ...]
    advice: str
    source: FeedbackSource


class WritingFeedback(ModuleFeedback):
    task1_feedback: str | None = p.Field(default=None, alias="task1Feedback")
    task2_feedback: str | None = p.Field(default=None, alias="task2Feedback")


class OverallFeedback(FrozenModel):
    summary: str
    next_steps: tuple[str, ...] = p.Field(alias="nextSteps")
    source: FeedbackSource


class FeedbackBundle(FrozenModel):
    reading: ModuleFeedback | None = None
    listening: ModuleFeedback | None = None
    writing: WritingFeedback | None = None
    speaking: ModuleFeedback | None = None
    overall: OverallFeedback | None = None


class EvaluationResult(FrozenModel):
    scores: ModuleScores
    feedback: FeedbackBundle
