"""Resolution of AI provider settings from flags, environment and ``.fsct.yaml``."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ..config import AISettings
from .client import AIClient, ClientConfig
from .errors import NoAPIKeyError, ValidationError
from .providers import detect_provider

DEFAULT_PROVIDER = "minimax"
DEFAULT_API_KEY_ENV = "AI_API_KEY"
API_KEY_ENV_VARS = ("AI_API_KEY", "OPENAI_API_KEY", "MINIMAX_API_KEY")
VALID_PROVIDERS = ("minimax", "openai", "custom")


@dataclass
class AIConfig:
    enabled: bool = True
    provider: str = ""
    api_key: str = ""
    api_key_env: str = DEFAULT_API_KEY_ENV
    base_url: str = ""
    model: str = ""
    timeout: float = 30.0
    max_retries: int = 3
    offline: bool = False

    def apply_settings(self, settings: AISettings) -> None:
        """Layer values from the ``ai`` block of ``.fsct.yaml`` over the defaults."""
        if settings.provider:
            self.provider = settings.provider
        if settings.api_key:
            self.api_key = settings.api_key
        if settings.api_key_env:
            self.api_key_env = settings.api_key_env
        if settings.url:
            self.base_url = settings.url
        if settings.model:
            self.model = settings.model
        if settings.timeout:
            self.timeout = settings.timeout
        if settings.max_retries is not None:
            self.max_retries = settings.max_retries
        if settings.offline:
            self.offline = True

    def load_from_env(self, environ: Optional[Mapping[str, str]] = None) -> None:
        env = os.environ if environ is None else environ
        key = env.get(self.api_key_env, "") if self.api_key_env else ""
        if not key:
            key = next((env[name] for name in API_KEY_ENV_VARS if env.get(name)), "")
        if key:
            self.api_key = key
        if env.get("AI_PROVIDER"):
            self.provider = env["AI_PROVIDER"]
        if env.get("AI_BASE_URL"):
            self.base_url = env["AI_BASE_URL"]
        if env.get("AI_MODEL"):
            self.model = env["AI_MODEL"]

    @property
    def provider_name(self) -> str:
        if self.provider:
            return self.provider.lower()
        if self.base_url:
            return detect_provider(self.base_url)
        return DEFAULT_PROVIDER

    def validate(self) -> None:
        if self.offline or not self.enabled:
            return
        if not self.api_key:
            raise NoAPIKeyError(f"no API key configured (set {self.api_key_env} env var)")
        provider = self.provider_name
        if provider not in VALID_PROVIDERS:
            choices = ", ".join(VALID_PROVIDERS)
            raise ValidationError("provider", f"invalid provider {provider} (must be one of: {choices})")
        if provider == "custom" and not self.base_url:
            raise ValidationError("base_url", "custom provider requires base_url")

    @property
    def is_configured(self) -> bool:
        return self.enabled and not self.offline and bool(self.api_key)

    def masked_api_key(self) -> str:
        """Show only the first and last four characters of the key."""
        if not self.api_key:
            return ""
        if len(self.api_key) <= 8:
            return "****"
        return f"{self.api_key[:4]}****{self.api_key[-4:]}"

    def new_client(self) -> AIClient:
        self.validate()
        client_config = ClientConfig(timeout=self.timeout)
        if self.max_retries > 0:
            client_config.max_retries = self.max_retries
        return AIClient.from_settings(
            api_key=self.api_key,
            provider_name=self.provider_name,
            base_url=self.base_url,
            model=self.model,
            config=client_config,
        )


def load_ai_config(
    settings: Optional[AISettings] = None,
    *,
    api_key: Optional[str] = None,
    provider: Optional[str] = None,
    base_url: Optional[str] = None,
    model: Optional[str] = None,
    offline: bool = False,
    environ: Optional[Mapping[str, str]] = None,
) -> AIConfig:
    """Resolve settings with priority: flags, then env vars, then file, then defaults."""
    config = AIConfig()
    if settings is not None:
        config.apply_settings(settings)
    config.load_from_env(environ)
    if api_key:
        config.api_key = api_key
    if provider:
        config.provider = provider
    if base_url:
        config.base_url = base_url
    if model:
        config.model = model
    if offline:
        config.offline = True
    return config


__all__ = [
    "AIConfig",
    "API_KEY_ENV_VARS",
    "DEFAULT_PROVIDER",
    "VALID_PROVIDERS",
    "load_ai_config",
]
