"""Feedback generation for scored modules and the overall result."""

from __future__ import annotations

import logging
import re as regex
import typing as t

import jinja2

from bandwise.llm.client import CompletionClient
from bandwise.llm.errors import RequestError
from bandwise.llm.prompt import build_module_feedback_prompt, build_overall_feedback_prompt, \
    build_writing_task_feedback_prompt, EXAMINER_SYSTEM
from bandwise.model import ExamModule, ExamVariant, FeedbackSource, ModuleFeedback, ModuleScores, OverallFeedback, \
    WritingContent, WritingFeedback, WritingTaskKind

from . import bank
from .config import ScoringSettings

logger = logging.getLogger(__name__)

STRENGTHS_PATTERN = regex.compile(r"Strengths:\s*([\s\S]*?)(?=Weaknesses:|$)", regex.IGNORECASE)
WEAKNESSES_PATTERN = regex.compile(r"Weaknesses:\s*([\s\S]*?)(?=Advice:|$)", regex.IGNORECASE)
ADVICE_PATTERN = regex.compile(r"Advice:\s*([\s\S]*)", regex.IGNORECASE)
SUMMARY_PATTERN = regex.compile(r"Summary:\s*([\s\S]*?)(?=Next Steps:|$)", regex.IGNORECASE)
NEXT_STEPS_PATTERN = regex.compile(r"Next Steps:\s*([\s\S]*)", regex.IGNORECASE)

# a line opening with "-", "•", "*" or "1." / "1)"
BULLET_PATTERN = regex.compile(r"\n[ \t]*(?:[-•*]|\d+[.)])[ \t]*")


class ParsedFeedback(t.TypedDict):
    strengths: list[str]
    weaknesses: list[str]
    advice: str


def _section(pattern: regex.Pattern[str], text: str) -> str:
    match = pattern.search(text)
    return match.group(1).strip() if match else ""


def extract_bullets(text: str) -> list[str]:
    """Split a section into its bulleted or numbered items."""
    items = BULLET_PATTERN.split("\n" + text.strip())
    return [item.strip() for item in items if item.strip()]


def strip_bullet(line: str) -> str:
    return BULLET_PATTERN.sub("", "\n" + line.strip(), count=1).strip()


def parse_module_feedback(reply: str) -> ParsedFeedback | None:
    """Slice a Strengths/Weaknesses/Advice reply; None if any section is empty."""
    strengths = extract_bullets(_section(STRENGTHS_PATTERN, reply))
    weaknesses = extract_bullets(_section(WEAKNESSES_PATTERN, reply))
    advice_lines = [strip_bullet(line) for line in _section(ADVICE_PATTERN, reply).splitlines()]
    advice_lines = [line for line in advice_lines if line]
    if not strengths or not weaknesses or not advice_lines:
        return None
    return ParsedFeedback(strengths=strengths, weaknesses=weaknesses, advice=advice_lines[0])


async def generate_module_feedback(
    module: ExamModule,
    band: float,
    variant: ExamVariant,
    client: CompletionClient,
    env: jinja2.Environment,
    settings: ScoringSettings,
) -> ModuleFeedback:
    """Generated feedback for one module, or the static feedback for its tier.

    The two are never mixed: one empty section discards the whole reply.
    """
    prompt = build_module_feedback_prompt(env, variant, module, band)
    try:
        reply = await client.complete(prompt, system=EXAMINER_SYSTEM)
    except RequestError as e:
        logger.warning(f"{module.value} feedback request failed, using static feedback: {e}")
        return bank.module_feedback(module, band, settings.high_band, settings.low_band)

    parsed = parse_module_feedback(reply)
    if parsed is None:
        logger.warning(f"{module.value} feedback reply was incomplete, using static feedback")
        return bank.module_feedback(module, band, settings.high_band, settings.low_band)

    cls = WritingFeedback if module is ExamModule.Writing else ModuleFeedback
    return cls(
        strengths=tuple(parsed["strengths"]),
        weaknesses=tuple(parsed["weaknesses"]),
        advice=parsed["advice"],
        source=FeedbackSource.AI,
    )


async def generate_task_feedback(
    kind: WritingTaskKind,
    instructions: str,
    response: str,
    client: CompletionClient,
    env: jinja2.Environment,
) -> str:
    prompt = build_writing_task_feedback_prompt(env, kind, instructions, response)
    try:
        reply = (await client.complete(prompt, system=EXAMINER_SYSTEM)).strip()
    except RequestError as e:
        logger.warning(f"{kind.value} critique request failed: {e}")
        return bank.TASK_FEEDBACK_FALLBACK
    return reply or bank.TASK_FEEDBACK_FALLBACK


async def generate_writing_feedback(
    band: float,
    content: WritingContent | None,
    responses: t.Mapping[str, str],
    variant: ExamVariant,
    client: CompletionClient,
    env: jinja2.Environment,
    settings: ScoringSettings,
) -> WritingFeedback:
    """Module feedback plus a critique of each task that has a response."""
    feedback = await generate_module_feedback(ExamModule.Writing, band, variant, client, env, settings)
    critiques: dict[str, str] = {}
    for kind in WritingTaskKind:
        response = responses.get(kind.value, "").strip()
        if not response:
            continue
        task = content.task(kind) if content is not None else None
        instructions = task.instructions if task is not None else ""
        critiques[f"{kind.value}_feedback"] = await generate_task_feedback(kind, instructions, response, client, env)
    return t.cast(WritingFeedback, feedback).model_copy(update=critiques)


def parse_overall_feedback(reply: str) -> tuple[str, list[str]]:
    return _section(SUMMARY_PATTERN, reply), extract_bullets(_section(NEXT_STEPS_PATTERN, reply))


async def generate_overall_feedback(
    scores: ModuleScores,
    client: CompletionClient,
    env: jinja2.Environment,
) -> OverallFeedback | None:
    """Summary and study plan for the whole attempt; None without an overall band."""
    overall = scores.overall
    if overall is None:
        return None

    prompt = build_overall_feedback_prompt(env, scores)
    try:
        reply = await client.complete(prompt, system=EXAMINER_SYSTEM)
    except RequestError as e:
        logger.warning(f"overall feedback request failed, using static summary: {e}")
        return bank.overall_feedback(overall)

    summary, next_steps = parse_overall_feedback(reply)
    if not summary:
        logger.warning("overall feedback reply had no summary")
    return OverallFeedback(
        summary=summary or bank.DEFAULT_SUMMARY,
        next_steps=tuple(next_steps) or bank.DEFAULT_NEXT_STEPS,
        source=FeedbackSource.AI if summary else FeedbackSource.Fallback,
    )
