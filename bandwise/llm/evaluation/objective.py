"""Scoring of the question-bearing modules (reading, listening)."""

from __future__ import annotations

import logging
import typing as t

from bandwise.model import ListeningContent, ReadingContent, SubmittedAnswer

from .band import percentage_to_band
from .comparator import answers_match
from .config import ScoringSettings

logger = logging.getLogger(__name__)


class ObjectiveTally(t.TypedDict):
    """Raw and converted result for one objective module."""

    correct: int
    total: int
    band: float | None
    incorrect_ids: list[int]


def tally_module(
    content: ReadingContent | ListeningContent,
    answers: t.Mapping[str, SubmittedAnswer] | None,
    settings: ScoringSettings,
) -> ObjectiveTally:
    """Compare every question's canonical answer with the submission for its id.

    A question without a submission counts as incorrect; there is no partial
    credit.
    """
    answers = answers or {}
    correct = 0
    total = 0
    incorrect: list[int] = []

    for question in content.iter_questions():
        total += 1
        if answers_match(answers.get(str(question.id)), question.answer):
            correct += 1
        else:
            incorrect.append(question.id)

    band = percentage_to_band(correct, total, settings.band_table, settings.floor_band)
    logger.debug(f"objective tally {correct}/{total} -> {band}")
    return ObjectiveTally(correct=correct, total=total, band=band, incorrect_ids=incorrect)
