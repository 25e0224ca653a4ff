"""CLI commands for scoring exam attempts."""

from __future__ import annotations

import asyncio
import pathlib
import typing as t

import pydantic as p

import bandwise.lib.cli as click
from bandwise.core import di
from bandwise.llm.evaluation import EvaluationPipeline
from bandwise.model import AnswerMap, ExamDocument, ExamVariant

TModel = t.TypeVar("TModel", bound=p.BaseModel)


def load_model(model: type[TModel], path: pathlib.Path) -> TModel:
    try:
        return model.model_validate_json(path.read_text(encoding="utf8"))
    except p.ValidationError as e:
        raise click.BadParameter(f"{path}: {e.error_count()} validation error(s)\n{e}") from e


@click.group()
def evaluate() -> None:
    """Commands for evaluating exam attempts."""
    ...


@evaluate.command(name="attempt")
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path))
@click.argument("answers", type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path))
@click.option("-V", "--variant", default=ExamVariant.Academic, type=click.EnumType(ExamVariant))
@di.inject
def attempt(
    document: pathlib.Path,
    answers: pathlib.Path,
    variant: ExamVariant,
    pipeline: EvaluationPipeline = di.Provide["evaluator"],  # noqa: B008
) -> None:
    """Score the ANSWERS given to the exam in DOCUMENT and print the result as JSON."""
    exam = load_model(ExamDocument, document)
    submitted = load_model(AnswerMap, answers)

    result = asyncio.run(pipeline.evaluate(exam, submitted, variant))
    click.echo(result.model_dump_json(by_alias=True, indent=2))
