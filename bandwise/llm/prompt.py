"""Prompt construction for generation, band estimation and feedback.

Prompts are Jinja2 templates under `templates/llm`; this module gathers their
context. The example document shown to the generator is assembled from the
requested modules only.
"""

from __future__ import annotations

import pathlib
import typing as t

import jinja2

import bandwise.lib.json
from bandwise.model import ExamModule, ExamVariant, ModuleScores, SpeakingContent, WritingContent, WritingTaskKind

TEMPLATE_PATH = pathlib.Path(__file__).parent.parent / "templates" / "llm"

GENERATION_SYSTEM = "You are an IELTS test content generator. Respond only with a single valid JSON object."
EXAMINER_SYSTEM = "You are an experienced IELTS examiner."

EXAMPLE_SHAPES: dict[ExamModule, dict[str, t.Any]] = {
    ExamModule.Reading: {
        "passages": [
            {
                "title": "The History of Tea",
                "content": "Tea has a long and fascinating history...",
                "questions": [
                    {
                        "id": 1,
                        "type": "multiple-choice",
                        "text": "What is the main focus of the passage?",
                        "options": ["The cultivation of tea", "The history of tea", "Tea drinking customs"],
                        "answer": "The history of tea",
                    }
                ],
            }
        ]
    },
    ExamModule.Listening: {
        "sections": [
            {
                "title": "Conversation between students",
                "audioText": "Person A: Hi, I was wondering if you could help me with...",
                "questions": [
                    {
                        "id": 1,
                        "type": "fill-blank",
                        "text": "The student needs help with _____.",
                        "answer": "assignment",
                    }
                ],
            }
        ]
    },
    ExamModule.Writing: {
        "tasks": [
            {
                "type": "task1",
                "instructions": "The graph below shows the population changes in a country...",
                "content": "Description of chart data showing population trends from 1990 to 2020",
                "imageDescription": "Line graph showing population growth trend from 1990 to 2020",
            },
            {
                "type": "task2",
                "instructions": (
                    "Some people believe that university education should be free for all students. "
                    "Others think students should pay for their education. Discuss both views and give your opinion."
                ),
            },
        ]
    },
    ExamModule.Speaking: {
        "parts": [
            {
                "part": 1,
                "questions": [
                    {
                        "text": "Do you enjoy traveling?",
                        "followUpQuestions": ["What kinds of places do you like to visit?", "How often do you travel?"],
                    }
                ],
            },
            {
                "part": 2,
                "questions": [
                    {
                        "text": (
                            "Describe a book that you enjoyed reading. You should say: what the book was about, "
                            "when you read it, why you decided to read it, and explain why you enjoyed it."
                        )
                    }
                ],
            },
        ]
    },
}


def create_prompt_env(template_path: pathlib.Path | None = None) -> jinja2.Environment:
    """Environment for prompt templates: no autoescaping, block whitespace trimmed."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(template_path or TEMPLATE_PATH),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.policies.update({
        "json.dumps_function": bandwise.lib.json.dumps,
        "json.dumps_kwargs": {"sort_keys": False, "ensure_ascii": False},
    })
    return env


def example_document(modules: t.Iterable[ExamModule]) -> str:
    requested = set(modules)
    shape = {m.value: EXAMPLE_SHAPES[m] for m in ExamModule if m in requested}
    return bandwise.lib.json.dumps(shape, indent=2, ensure_ascii=False)


def build_generation_prompt(env: jinja2.Environment, variant: ExamVariant, modules: t.Iterable[ExamModule]) -> str:
    requested = set(modules)
    ordered = [m for m in ExamModule if m in requested]
    if not ordered:
        raise ValueError("at least one module must be requested")

    template = env.get_template("generation/exam.j2")
    return template.render(
        test_type=variant.title,
        modules=", ".join(m.title for m in ordered),
        example=example_document(ordered),
    )


def build_writing_evaluation_prompt(
    env: jinja2.Environment,
    variant: ExamVariant,
    content: WritingContent | None,
    responses: t.Mapping[str, str],
) -> str:
    tasks: list[dict[str, t.Any]] = []
    for number, kind in enumerate(WritingTaskKind, start=1):
        task = content.task(kind) if content is not None else None
        tasks.append({
            "number": number,
            "instructions": task.instructions if task is not None else "",
            "response": responses.get(kind.value, ""),
        })

    template = env.get_template("evaluation/writing.j2")
    return template.render(test_type=variant.title, tasks=tasks)


def build_speaking_evaluation_prompt(
    env: jinja2.Environment,
    variant: ExamVariant,
    content: SpeakingContent | None,
    transcripts: t.Sequence[str],
    recordings: int = 0,
) -> str:
    questions: list[str] = []
    if content is not None:
        for part in content.parts:
            questions.extend(q.text for q in part.questions)

    template = env.get_template("evaluation/speaking.j2")
    return template.render(
        test_type=variant.title,
        questions=questions,
        transcripts=transcripts,
        recordings=recordings,
    )


def build_module_feedback_prompt(
    env: jinja2.Environment,
    variant: ExamVariant,
    module: ExamModule,
    band: float,
) -> str:
    template = env.get_template("feedback/module.j2")
    return template.render(test_type=variant.title, module=module.value, score=f"{band:.1f}")


def build_writing_task_feedback_prompt(
    env: jinja2.Environment,
    kind: WritingTaskKind,
    instructions: str,
    response: str,
) -> str:
    template = env.get_template("feedback/writing_task.j2")
    number = list(WritingTaskKind).index(kind) + 1
    return template.render(number=number, instructions=instructions, response=response)


def build_overall_feedback_prompt(env: jinja2.Environment, scores: ModuleScores) -> str:
    template = env.get_template("feedback/overall.j2")
    lines = [(m.title, f"{band:.1f}") for m, band in scores.present().items()]
    overall = scores.overall
    return template.render(scores=lines, overall=f"{overall:.1f}" if overall is not None else "")
