"""Remote completion client, provider adapters and response parsing."""

from .client import AIClient, ClientConfig
from .config import AIConfig, load_ai_config
from .context import CallContext
from .errors import AIError, APIError, RetriesExhaustedError, is_retryable_error
from .metadata import ComplianceMetadata, extract_metadata
from .providers import CompletionRequest, CompletionResponse, Provider, ProviderFactory
from .response import AIAnalysis, parse_response, parse_response_strict

__all__ = [
    "AIAnalysis",
    "AIClient",
    "AIConfig",
    "AIError",
    "APIError",
    "CallContext",
    "ClientConfig",
    "CompletionRequest",
    "CompletionResponse",
    "ComplianceMetadata",
    "Provider",
    "ProviderFactory",
    "RetriesExhaustedError",
    "extract_metadata",
    "is_retryable_error",
    "load_ai_config",
    "parse_response",
    "parse_response_strict",
]
