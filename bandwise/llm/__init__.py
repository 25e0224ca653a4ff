"""Generative-text integration: clients, prompts and content recovery."""

__all__ = [
    # Provider types
    "ProviderType",
    "create_chat_model",
    # Clients
    "ChatModelCompletionClient",
    "CompletionClient",
    "HTTPCompletionClient",
    "ModelFactory",
    "unwrap_envelope",
    # Configuration
    "ExamModels",
    "LLMSecrets",
    "LLMSettings",
    "ModelSettings",
    "ProviderSecrets",
    "RecoverySettings",
    # Errors
    "ContentValidationError",
    "EnvelopeError",
    "GenerationError",
    "GenerationStage",
    "LLMError",
    "MalformedModuleError",
    "MissingModuleError",
    "RecoveryError",
    "RequestError",
]

from .client import ChatModelCompletionClient, CompletionClient, HTTPCompletionClient
from .config import ExamModels, LLMSecrets, LLMSettings, ModelSettings, ProviderSecrets, RecoverySettings
from .envelope import unwrap_envelope
from .errors import ContentValidationError, EnvelopeError, GenerationError, GenerationStage, LLMError, \
    MalformedModuleError, MissingModuleError, RecoveryError, RequestError
from .factory import ModelFactory
from .provider import create_chat_model, ProviderType
