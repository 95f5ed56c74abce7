"""Retrying wrapper around a completion provider."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from ..logging import get_logger
from .context import CallContext
from .errors import (
    AIError,
    APITimeoutError,
    RequestCanceledError,
    RetriesExhaustedError,
    is_retryable_error,
)
from .providers import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    CompletionRequest,
    CompletionResponse,
    Provider,
    ProviderFactory,
)

_LOGGER = get_logger("ai.client")


@dataclass
class ClientConfig:
    """Timeout and retry policy; durations are in seconds."""

    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 1.0
    max_retry_delay: float = 30.0
    retry_backoff: float = 2.0


class AIClient:
    """Sends completion requests with a deadline and exponential-backoff retries."""

    def __init__(self, provider: Provider, config: Optional[ClientConfig] = None) -> None:
        self.provider = provider
        self.config = config or ClientConfig()

    @classmethod
    def from_settings(
        cls,
        *,
        api_key: str,
        provider_name: str,
        base_url: str = "",
        model: str = "",
        config: Optional[ClientConfig] = None,
    ) -> "AIClient":
        provider = ProviderFactory(api_key, base_url, model).create(provider_name)
        return cls(provider, config)

    @property
    def is_available(self) -> bool:
        return self.provider is not None

    def complete(
        self, request: CompletionRequest, context: Optional[CallContext] = None
    ) -> CompletionResponse:
        """Run ``request`` through the provider, retrying retryable failures.

        Without a deadline on ``context`` the configured timeout becomes one.
        Cancellation wins over retrying: a context that finishes during a
        backoff sleep ends the call with :class:`RequestCanceledError` or
        :class:`APITimeoutError`.
        """
        if context is None:
            context = CallContext()
        if context.deadline is None and self.config.timeout > 0:
            context = context.child(self.config.timeout)

        last_error: Optional[BaseException] = None
        for attempt in range(self.config.max_retries + 1):
            if context.done:
                raise self._context_error(context)
            if attempt:
                _LOGGER.debug("Retry attempt %d/%d", attempt, self.config.max_retries)
            try:
                response = self.provider.complete(request, context)
            except AIError as exc:
                last_error = exc
                if attempt < self.config.max_retries and is_retryable_error(exc):
                    delay = self.retry_delay(attempt)
                    _LOGGER.debug("Request failed (retryable), waiting %.2fs: %s", delay, exc)
                    if context.wait(delay):
                        raise self._context_error(context) from exc
                    continue
                _LOGGER.debug("Request failed (not retryable): %s", exc)
                if attempt and is_retryable_error(exc):
                    raise RetriesExhaustedError(attempt + 1, exc) from exc
                raise
            _LOGGER.debug("Request succeeded (tokens: %d)", response.usage.total_tokens)
            return response

        assert last_error is not None
        raise RetriesExhaustedError(self.config.max_retries + 1, last_error)

    def complete_simple(
        self, system_prompt: str, user_prompt: str, context: Optional[CallContext] = None
    ) -> str:
        request = CompletionRequest(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            max_tokens=DEFAULT_MAX_TOKENS,
            temperature=DEFAULT_TEMPERATURE,
        )
        return self.complete(request, context).content

    def retry_delay(self, attempt: int) -> float:
        """``retry_delay * retry_backoff ** attempt`` clamped to ``max_retry_delay``."""
        try:
            delay = self.config.retry_delay * (self.config.retry_backoff**attempt)
        except OverflowError:
            return self.config.max_retry_delay
        return min(delay, self.config.max_retry_delay)

    @staticmethod
    def _context_error(context: CallContext) -> Exception:
        if context.cancelled:
            return RequestCanceledError()
        return APITimeoutError()


__all__ = ["AIClient", "ClientConfig"]
