"""CLI commands for synthesizing exam content."""

from __future__ import annotations

import asyncio
import pathlib
import typing as t

import bandwise.lib.cli as click
from bandwise.core import di, LoggingProvider
from bandwise.llm import GenerationError, ModelFactory, ProviderType
from bandwise.llm.generation import ContentSynthesizer
from bandwise.model import ExamModule, ExamVariant


@click.group()
def generate() -> None:
    """Commands for generating exam content."""
    ...


@generate.command(name="exam")
@click.option("-V", "--variant", default=ExamVariant.Academic, type=click.EnumType(ExamVariant))
@click.option(
    "-m",
    "--module",
    "modules",
    multiple=True,
    required=True,
    type=click.EnumType(ExamModule),
    help="module to include, may be repeated",
)
@click.option(
    "-p",
    "--provider",
    default=None,
    type=click.EnumType(ProviderType),
    help="generate with this provider instead of the configured one",
)
@click.option("-O", "--output", default=None, type=click.Path(dir_okay=False, path_type=pathlib.Path))
@di.inject
def exam(
    variant: ExamVariant,
    modules: tuple[ExamModule, ...],
    provider: ProviderType | None,
    output: pathlib.Path | None,
    make_synthesizer: t.Callable[..., ContentSynthesizer] = di.Provide["synthesizer.provider"],  # noqa: B008
    factory: ModelFactory = di.Provide["llm.factory"],  # noqa: B008
    logging_provider: LoggingProvider = di.Provide["logging"],  # noqa: B008
) -> None:
    """Synthesize an exam of the requested modules and print it as JSON."""
    logger = logging_provider.get_logger()

    if provider is not None:
        synthesizer = make_synthesizer(client=factory.create_generation_client(provider))
    else:
        synthesizer = make_synthesizer()

    try:
        document = asyncio.run(synthesizer.synthesize(variant, modules))
    except GenerationError as e:
        logger.error("exam generation failed", extra={"stage": e.stage.value})
        raise click.ClickException(str(e)) from e

    js = document.model_dump_json(by_alias=True, exclude_none=True, indent=2)
    if output is None:
        click.echo(js)
    else:
        output.write_text(js + "\n", encoding="utf8")
        logger.info(f"wrote exam to {output}", extra={"modules": [m.value for m in document.modules]})
