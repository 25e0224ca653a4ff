"""Band estimation for the open-ended modules (writing, speaking).

The estimate comes from the evaluation model when it answers with a usable
figure, and from a deterministic word-count heuristic otherwise.
"""

from __future__ import annotations

import logging
import re as regex
import typing as t

import jinja2

from bandwise.llm.client import CompletionClient
from bandwise.llm.errors import RequestError
from bandwise.llm.prompt import build_speaking_evaluation_prompt, build_writing_evaluation_prompt, EXAMINER_SYSTEM
from bandwise.model import ExamVariant, SpeakingContent, WritingContent, WritingTaskKind

from .band import snap_band
from .config import ScoringSettings, WordCountPolicy

logger = logging.getLogger(__name__)

_Band = r"(\d+(?:\.\d+)?)"
WRITING_OVERALL_PATTERN = regex.compile(r"Overall\s+Writing\s+Score\s*:\s*" + _Band, regex.IGNORECASE)
WRITING_TASK_PATTERNS: dict[WritingTaskKind, regex.Pattern[str]] = {
    WritingTaskKind.Task1: regex.compile(r"Task\s*1\s+Score\s*:\s*" + _Band, regex.IGNORECASE),
    WritingTaskKind.Task2: regex.compile(r"Task\s*2\s+Score\s*:\s*" + _Band, regex.IGNORECASE),
}
# a single band-scale figure such as 6 or 6.5
BAND_PATTERN = regex.compile(r"\b([0-9](?:\.[0-9])?)\b")


class SubjectiveResult(t.TypedDict):
    band: float
    # whether the band came from the evaluation model
    estimated: bool


def combine_tasks(task1: float, task2: float) -> float:
    """Task 2 carries twice the weight of task 1."""
    return snap_band((task1 + 2 * task2) / 3)


def extract_writing_band(reply: str) -> float | None:
    """The labelled overall writing figure, else the weighted task figures."""
    match = WRITING_OVERALL_PATTERN.search(reply)
    if match is not None:
        return snap_band(float(match.group(1)))

    tasks = {kind: pattern.search(reply) for kind, pattern in WRITING_TASK_PATTERNS.items()}
    task1, task2 = tasks[WritingTaskKind.Task1], tasks[WritingTaskKind.Task2]
    if task1 is not None and task2 is not None:
        return combine_tasks(float(task1.group(1)), float(task2.group(1)))
    return None


def extract_band(reply: str) -> float | None:
    """The first band-scale number in `reply`."""
    match = BAND_PATTERN.search(reply)
    if match is None:
        return None
    return snap_band(float(match.group(1)))


def count_words(text: str) -> int:
    return len(text.split())


def heuristic_band(text: str, policy: WordCountPolicy, settings: ScoringSettings) -> float:
    """Word-count estimate for one response; an empty response scores 0."""
    words = count_words(text)
    if words == 0:
        return 0.0

    if words < policy.min_words:
        for tier in policy.tiers:
            if words >= tier.min_words:
                return tier.band
        return 0.0

    band = policy.base_band
    lowered = text.lower()
    if words >= policy.bonus_words:
        band += policy.step
    if policy.punctuation_bonus and "," in text and "." in text:
        band += policy.step
    if policy.cohesion_bonus and any(device in lowered for device in settings.cohesive_devices):
        band += policy.step
    if policy.conclusion_bonus and any(phrase in lowered for phrase in settings.conclusion_phrases):
        band += policy.step
    return snap_band(band)


def estimate_writing_band(responses: t.Mapping[str, str], settings: ScoringSettings) -> float:
    task1 = heuristic_band(responses.get(WritingTaskKind.Task1.value, ""), settings.task1, settings)
    task2 = heuristic_band(responses.get(WritingTaskKind.Task2.value, ""), settings.task2, settings)
    return combine_tasks(task1, task2)


def split_speaking_responses(responses: t.Mapping[str, str], settings: ScoringSettings) -> tuple[list[str], int]:
    """Separate transcript text from opaque recording references."""
    reference = regex.compile(settings.recording_pattern, regex.IGNORECASE)
    transcripts: list[str] = []
    recordings = 0
    for response in responses.values():
        response = response.strip()
        if not response:
            continue
        if reference.match(response):
            recordings += 1
        else:
            transcripts.append(response)
    return transcripts, recordings


def estimate_speaking_band(transcripts: t.Sequence[str], recordings: int, settings: ScoringSettings) -> float:
    if transcripts:
        return heuristic_band(" ".join(transcripts), settings.speaking, settings)
    if recordings:
        return settings.recording_band
    return settings.neutral_speaking_band


async def evaluate_writing(
    content: WritingContent | None,
    responses: t.Mapping[str, str],
    variant: ExamVariant,
    client: CompletionClient,
    env: jinja2.Environment,
    settings: ScoringSettings,
) -> SubjectiveResult:
    """Estimate the writing band.

    Without any written response there is nothing to send and the band is 0.
    """
    if not any(r.strip() for r in responses.values()):
        logger.info("no writing responses submitted")
        return SubjectiveResult(band=0.0, estimated=False)

    prompt = build_writing_evaluation_prompt(env, variant, content, responses)
    try:
        reply = await client.complete(prompt, system=EXAMINER_SYSTEM)
    except RequestError as e:
        logger.warning(f"writing evaluation request failed, using heuristic: {e}", extra={"code": e.code})
    else:
        band = extract_writing_band(reply)
        if band is not None:
            return SubjectiveResult(band=band, estimated=True)
        logger.warning("writing evaluation reply carried no band, using heuristic")

    return SubjectiveResult(band=estimate_writing_band(responses, settings), estimated=False)


async def evaluate_speaking(
    content: SpeakingContent | None,
    responses: t.Mapping[str, str],
    variant: ExamVariant,
    client: CompletionClient,
    env: jinja2.Environment,
    settings: ScoringSettings,
) -> SubjectiveResult:
    """Estimate the speaking band.

    With no response at all the neutral band is returned without a request.
    """
    transcripts, recordings = split_speaking_responses(responses, settings)
    if not transcripts and not recordings:
        logger.info("no speaking responses submitted")
        return SubjectiveResult(band=settings.neutral_speaking_band, estimated=False)

    prompt = build_speaking_evaluation_prompt(env, variant, content, transcripts, recordings)
    try:
        reply = await client.complete(prompt, system=EXAMINER_SYSTEM)
    except RequestError as e:
        logger.warning(f"speaking evaluation request failed, using heuristic: {e}", extra={"code": e.code})
    else:
        band = extract_band(reply)
        if band is not None:
            return SubjectiveResult(band=band, estimated=True)
        logger.warning("speaking evaluation reply carried no band, using heuristic")

    return SubjectiveResult(band=estimate_speaking_band(transcripts, recordings, settings), estimated=False)
