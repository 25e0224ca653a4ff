from __future__ import annotations

import types
import typing as t
from pathlib import Path

import pydantic as p
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Factory, Object, Provider, Resource, Singleton

import bandwise
from bandwise.llm import RecoverySettings
from bandwise.llm.evaluation import EvaluationPipeline, ScoringSettings
from bandwise.llm.generation import ContentSynthesizer
from bandwise.model import DeploymentEnvironment

from ..config import Secrets, Settings
from ..di import NotReady, wire_loaded
from ..logging import LoggingProvider
from .llm import LLMContainer
from .template import TemplateContainer


def provide_scoring(config: dict[str, t.Any] | None) -> ScoringSettings:
    return ScoringSettings.model_validate(config or {})


def provide_recovery(config: dict[str, t.Any] | None) -> RecoverySettings:
    return RecoverySettings.model_validate(config or {})


class BandwiseContainer(DeclarativeContainer):
    config: Configuration = Configuration()
    secrets: Configuration = Configuration()

    debug: Provider[bool] = Singleton(bool)
    env: Provider[DeploymentEnvironment] = Singleton(DeploymentEnvironment)
    root: Object[NotReady | Path] = Object(NotReady())

    logging: Provider[LoggingProvider] = Resource(LoggingProvider, config=config.logging, debug=debug)
    template: Provider[TemplateContainer] = Container(TemplateContainer, config=config.template, root=root)
    llm: Provider[LLMContainer] = Container(LLMContainer, config=config.llm, secrets=secrets.llm)

    scoring: Provider[ScoringSettings] = Singleton(provide_scoring, config.scoring)
    recovery: Provider[RecoverySettings] = Singleton(provide_recovery, config.recovery)

    synthesizer: Provider[ContentSynthesizer] = Factory(
        ContentSynthesizer, client=llm.generation_client, env=template.llm, settings=recovery
    )
    evaluator: Provider[EvaluationPipeline] = Factory(
        EvaluationPipeline,
        evaluation_client=llm.evaluation_client,
        feedback_client=llm.feedback_client,
        env=template.llm,
        settings=scoring,
    )

    @staticmethod
    def boot(
        ct: BandwiseContainer,
        /,
        debug: bool,
        env: DeploymentEnvironment,
        config_root: p.FileUrl,
        secrets_path: p.AnyUrl | None = None,
        override: tuple[str, ...] | None = None,
        wiring: tuple[str | types.ModuleType, ...] | None = None,
    ) -> None:
        """Load settings and secrets for `env`, then wire the command modules.

        Logging is configured as soon as the settings are loaded, so everything
        after that point, secrets included, is logged through it.
        """
        settings = Settings(env=env, root=local_directory(config_root), override=override or ())
        ct.config.from_pydantic(settings)
        ct.debug.override(debug)
        ct.env.override(env)
        ct.root.override(Path(bandwise.__file__).resolve().parent.parent)

        if wiring:
            ct.wire(modules=wiring)
        wire_loaded(ct, "bandwise")

        logger = ct.logging().get_logger()
        for option in settings.override:
            key, _, value = option.partition("=")
            logger.info("setting overridden", extra={"key": key.strip(), "value": value.strip()})

        ct.secrets.from_pydantic(Secrets(env=env, root=local_directory(secrets_path or config_root)))
        logger.debug("booted", extra={"env": env, "config": str(config_root), "debug": debug})


def local_directory(url: p.AnyUrl) -> p.AnyUrl:
    if url.scheme != "file":
        raise ValueError(f"{url}: only file:// locations are supported")
    return url
