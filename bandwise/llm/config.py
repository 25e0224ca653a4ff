"""LLM configuration settings."""

from __future__ import annotations

import pydantic as p
import pydantic_settings as ps

from .provider import ProviderType

DefaultModels: dict[ProviderType, str] = {
    ProviderType.Cohere: "command",
    ProviderType.Google: "gemini-1.5-pro",
    ProviderType.DeepSeek: "deepseek-chat",
    ProviderType.OpenAI: "gpt-4o-mini",
    ProviderType.Anthropic: "claude-3-5-haiku-latest",
}


class ModelSettings(ps.BaseSettings):
    """Settings for a specific model."""

    provider: ProviderType = ProviderType.Cohere
    # falls back to DefaultModels[provider]
    model: str | None = None
    # falls back to the provider's public endpoint
    endpoint: str | None = None
    max_tokens: int = 1000
    temperature: float = 0.3
    max_retries: int = 0
    timeout_seconds: float = 60.0

    @property
    def model_name(self) -> str:
        return self.model or DefaultModels[self.provider]


class ExamModels(ps.BaseSettings):
    """Model configuration for the different exam tasks."""

    # Model for generating exam content
    generation: ModelSettings = ModelSettings(
        provider=ProviderType.Cohere,
        max_tokens=4000,
        temperature=0.7,
        timeout_seconds=120.0,
    )

    # Model for estimating bands of written and spoken responses
    evaluation: ModelSettings = ModelSettings(
        provider=ProviderType.Cohere,
        max_tokens=1000,
        temperature=0.3,
    )

    # Model for generating feedback
    feedback: ModelSettings = ModelSettings(
        provider=ProviderType.Cohere,
        max_tokens=500,
        temperature=0.3,
    )


class LLMSettings(ps.BaseSettings):
    """Root LLM configuration."""

    models: ExamModels = ExamModels()


class ProviderSecrets(ps.BaseSettings):
    api_key: p.Secret[str]


class LLMSecrets(ps.BaseSettings):
    """LLM vendor API secrets."""

    cohere: ProviderSecrets | None = None
    google: ProviderSecrets | None = None
    deepseek: ProviderSecrets | None = None
    openai: ProviderSecrets | None = None
    anthropic: ProviderSecrets | None = None

    def api_key(self, provider: ProviderType) -> p.Secret[str] | None:
        secrets: ProviderSecrets | None = getattr(self, provider.value)
        return secrets.api_key if secrets is not None else None


class RecoverySettings(ps.BaseSettings):
    """Bounds on the generated-text recovery cascade."""

    # successive single-character repairs attempted on one candidate
    max_repairs: int = p.Field(default=8, ge=0)
    # characters scanned past a module key when salvaging its section
    salvage_window: int = p.Field(default=200_000, gt=0)
