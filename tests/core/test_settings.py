"""Tests for layered settings and secrets."""

from __future__ import annotations

import os
from pathlib import Path

import pydantic as p
import pytest
from pydantic_settings import SettingsError

import bandwise
from bandwise.core import Secrets, Settings
from bandwise.llm.provider import ProviderType
from bandwise.model import DeploymentEnvironment

CONFIG_ROOT = Path(os.path.dirname(bandwise.__file__)).parent / "config"


def config_url() -> p.FileUrl:
    return p.FileUrl(f"file://{CONFIG_ROOT}")


class TestSettings(object):
    """Tests for loading Settings from the YAML cascade."""

    def test_local_reads_root_yaml(self) -> None:
        settings = Settings(env=DeploymentEnvironment.Local, root=config_url())

        generation = settings.llm.models.generation
        assert generation.provider is ProviderType.Cohere
        assert generation.model_name == "command"
        assert generation.max_tokens == 4000
        assert generation.timeout_seconds == 120
        assert settings.recovery.max_repairs == 8
        assert settings.scoring.band_table[4].band == 7.0
        assert settings.logging.loggers["bandwise"].level == "INFO"

    def test_environment_file_replaces_root_file(self) -> None:
        """A file under env.d/<env> replaces the root file wholesale."""
        settings = Settings(env=DeploymentEnvironment.Test, root=config_url())

        evaluation = settings.llm.models.evaluation
        assert evaluation.timeout_seconds == 5
        assert evaluation.model is None
        assert evaluation.max_tokens == 1000
        assert settings.logging.loggers["bandwise"].level == "DEBUG"
        # no test override for recovery
        assert settings.recovery.salvage_window == 200_000

    def test_override_merges_into_yaml(self) -> None:
        settings = Settings(
            env=DeploymentEnvironment.Test,
            root=config_url(),
            override=("recovery.max_repairs=4", "llm.models.feedback.provider=google"),
        )

        assert settings.recovery.max_repairs == 4
        assert settings.recovery.salvage_window == 200_000
        assert settings.llm.models.feedback.provider is ProviderType.Google
        assert settings.llm.models.feedback.timeout_seconds == 5

    def test_malformed_override(self) -> None:
        with pytest.raises(SettingsError):
            Settings(env=DeploymentEnvironment.Test, root=config_url(), override=("recovery.max_repairs",))

    def test_logging_is_required(self, tmp_path: Path) -> None:
        """Every other section has defaults, logging must come from YAML."""
        (tmp_path / "recovery.yaml").write_text("max_repairs: 2\n", encoding="utf8")

        with pytest.raises(p.ValidationError):
            Settings(env=DeploymentEnvironment.Local, root=p.FileUrl(f"file://{tmp_path}"))


class TestSecrets(object):
    """Tests for provider credentials."""

    def test_environment_variable(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BANDWISE_LLM__COHERE__API_KEY", "co-test")

        secrets = Secrets(env=DeploymentEnvironment.Test, root=p.FileUrl(f"file://{tmp_path}"))

        key = secrets.llm.api_key(ProviderType.Cohere)
        assert key is not None and key.get_secret_value() == "co-test"
        assert secrets.llm.api_key(ProviderType.Google) is None

    def test_secrets_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("BANDWISE_LLM__GOOGLE__API_KEY", raising=False)
        (tmp_path / "secrets.yaml").write_text("llm:\n  google:\n    api_key: g-file\n", encoding="utf8")

        secrets = Secrets(env=DeploymentEnvironment.Local, root=p.FileUrl(f"file://{tmp_path}"))

        key = secrets.llm.api_key(ProviderType.Google)
        assert key is not None and key.get_secret_value() == "g-file"

    def test_environment_wins_over_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BANDWISE_LLM__COHERE__API_KEY", "co-env")
        env_dir = tmp_path / "env.d" / "test"
        env_dir.mkdir(parents=True)
        (env_dir / "secrets.yaml").write_text("llm:\n  cohere:\n    api_key: co-file\n", encoding="utf8")

        secrets = Secrets(env=DeploymentEnvironment.Test, root=p.FileUrl(f"file://{tmp_path}"))

        key = secrets.llm.api_key(ProviderType.Cohere)
        assert key is not None and key.get_secret_value() == "co-env"
