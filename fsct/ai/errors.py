"""Exception hierarchy for the AI completion client."""

from __future__ import annotations

from typing import Optional


class AIError(RuntimeError):
    """Base class for every failure raised by :mod:`fsct.ai`."""


class NoAPIKeyError(AIError):
    def __init__(self, message: str = "no API key configured") -> None:
        super().__init__(message)


class InvalidResponseError(AIError):
    def __init__(self, message: str = "invalid API response") -> None:
        super().__init__(message)


class APITimeoutError(AIError):
    def __init__(self, message: str = "API request timeout") -> None:
        super().__init__(message)


class RateLimitedError(AIError):
    def __init__(self, message: str = "rate limited by API") -> None:
        super().__init__(message)


class ProviderNotFoundError(AIError):
    def __init__(self, provider: str) -> None:
        super().__init__(f"provider not found: {provider}")
        self.provider = provider


class RequestFailedError(AIError):
    def __init__(self, message: str = "API request failed") -> None:
        super().__init__(message)


class RequestCanceledError(AIError):
    def __init__(self, message: str = "request canceled") -> None:
        super().__init__(message)


class APIError(AIError):
    """Non-success HTTP status (or vendor error block) returned by a provider."""

    def __init__(
        self,
        provider: str,
        status_code: int,
        message: str,
        retryable: Optional[bool] = None,
    ) -> None:
        super().__init__(f"{provider} API error (status {status_code}): {message}")
        self.provider = provider
        self.status_code = status_code
        self.message = message
        if retryable is None:
            retryable = status_code == 429 or status_code >= 500
        self.retryable = retryable


class ValidationError(AIError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"validation error for field '{field}': {message}")
        self.field = field
        self.message = message


class RetriesExhaustedError(AIError):
    """Raised once every attempt of a retrying call has failed."""

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        super().__init__(f"all {attempts} attempts failed: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


def is_retryable_error(exc: BaseException) -> bool:
    """HTTP 429 and 5xx responses and timeouts are worth another attempt."""
    if isinstance(exc, APIError):
        return exc.retryable
    return isinstance(exc, APITimeoutError)


__all__ = [
    "AIError",
    "APIError",
    "APITimeoutError",
    "InvalidResponseError",
    "NoAPIKeyError",
    "ProviderNotFoundError",
    "RateLimitedError",
    "RequestCanceledError",
    "RequestFailedError",
    "RetriesExhaustedError",
    "ValidationError",
    "is_retryable_error",
]
