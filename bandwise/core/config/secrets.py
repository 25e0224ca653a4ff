from __future__ import annotations

import pydantic as p
import pydantic_settings as ps
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from bandwise.llm.config import LLMSecrets
from bandwise.model import DeploymentEnvironment

from .base import BaseSecrets
from .source import YAMLSecretsSource


class Secrets(BaseSecrets):
    """Provider credentials.

    Environment variables (`BANDWISE_LLM__COHERE__API_KEY=...`) take precedence
    over `secrets.yaml`.
    """

    model_config = ps.SettingsConfigDict(
        env_prefix="BANDWISE_",
        env_nested_delimiter="__",
        populate_by_name=True,
    )

    root: p.AnyUrl
    env: DeploymentEnvironment

    llm: LLMSecrets = LLMSecrets()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, YAMLSecretsSource(settings_cls)
