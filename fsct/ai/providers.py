"""Chat-completion provider adapters (MiniMax, OpenAI and OpenAI-compatible)."""

from __future__ import annotations

import json
import socket
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..logging import get_logger
from .context import CallContext
from .errors import (
    APIError,
    APITimeoutError,
    InvalidResponseError,
    NoAPIKeyError,
    ProviderNotFoundError,
    RequestCanceledError,
    RequestFailedError,
    ValidationError,
)

_LOGGER = get_logger("ai.providers")

DEFAULT_MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.7
DEFAULT_HTTP_TIMEOUT = 30.0

MINIMAX_BASE_URL = "https://api.minimax.chat/v1"
MINIMAX_DEFAULT_MODEL = "abab6.5s-chat"
OPENAI_BASE_URL = "https://api.openai.com/v1"
OPENAI_DEFAULT_MODEL = "gpt-4"


@dataclass
class CompletionRequest:
    system_prompt: str = ""
    user_prompt: str = ""
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    model: Optional[str] = None


@dataclass
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class CompletionResponse:
    content: str
    finish_reason: str = ""
    model: str = ""
    usage: TokenUsage = field(default_factory=TokenUsage)


class Provider(ABC):
    """Contract shared by every completion backend."""

    name: str = ""

    @abstractmethod
    def set_api_key(self, key: str) -> None:
        ...

    @abstractmethod
    def set_model(self, model: str) -> None:
        ...

    @abstractmethod
    def available_models(self) -> List[str]:
        ...

    @abstractmethod
    def complete(
        self, request: CompletionRequest, context: Optional[CallContext] = None
    ) -> CompletionResponse:
        ...


class ChatCompletionsProvider(Provider):
    """``POST <base>/chat/completions`` with a bearer token, OpenAI wire format."""

    default_model = ""
    models: List[str] = []

    def __init__(
        self,
        *,
        base_url: str,
        model: str = "",
        api_key: str = "",
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.api_key = api_key
        self.timeout = timeout

    def set_api_key(self, key: str) -> None:
        self.api_key = key

    def set_model(self, model: str) -> None:
        self.model = model

    def available_models(self) -> List[str]:
        return list(self.models)

    def complete(
        self, request: CompletionRequest, context: Optional[CallContext] = None
    ) -> CompletionResponse:
        if not self.api_key:
            raise NoAPIKeyError()
        self._validate()
        model = request.model or self.model or self.default_model
        payload = {
            "model": model,
            "messages": self._build_messages(request),
            "max_tokens": request.max_tokens or DEFAULT_MAX_TOKENS,
            "temperature": request.temperature or DEFAULT_TEMPERATURE,
        }
        status, body = self._post(payload, context)
        return self._parse(status, body, model)

    def _validate(self) -> None:
        return None

    @staticmethod
    def _build_messages(request: CompletionRequest) -> List[Dict[str, str]]:
        messages: List[Dict[str, str]] = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.append({"role": "user", "content": request.user_prompt})
        return messages

    def _post(self, payload: Dict[str, Any], context: Optional[CallContext]) -> tuple[int, str]:
        if context is not None and context.cancelled:
            raise RequestCanceledError()
        timeout = self.timeout
        if context is not None:
            remaining = context.remaining()
            if remaining is not None:
                if remaining <= 0:
                    raise APITimeoutError()
                timeout = min(timeout, remaining)

        endpoint = f"{self.base_url}/chat/completions"
        http_request = Request(
            endpoint,
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            method="POST",
        )
        _LOGGER.debug("POST %s (model=%s, timeout=%.1fs)", endpoint, payload["model"], timeout)
        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                status = getattr(response, "status", 200)
                raw = response.read()
        except HTTPError as exc:
            status = exc.code
            raw = exc.read() if hasattr(exc, "read") else b""
        except (socket.timeout, TimeoutError) as exc:
            raise APITimeoutError() from exc
        except URLError as exc:
            if isinstance(exc.reason, (socket.timeout, TimeoutError)):
                raise APITimeoutError() from exc
            if context is not None and context.cancelled:
                raise RequestCanceledError() from exc
            raise RequestFailedError(f"request failed: {exc.reason}") from exc
        return status, raw.decode("utf-8", errors="replace") if raw else ""

    def _parse(self, status: int, body: str, model: str) -> CompletionResponse:
        data = self._decode(status, body)
        error = data.get("error")
        if isinstance(error, dict):
            raise APIError(self.name, status, str(error.get("message", "")))
        if status != 200:
            raise APIError(self.name, status, body)
        return self._to_response(data, model)

    def _decode(self, status: int, body: str) -> Dict[str, Any]:
        try:
            data = json.loads(body)
        except json.JSONDecodeError as exc:
            if status != 200:
                raise APIError(self.name, status, body) from exc
            raise InvalidResponseError(f"invalid API response: {exc}") from exc
        if not isinstance(data, dict):
            raise InvalidResponseError("invalid API response: expected a JSON object")
        return data

    @staticmethod
    def _to_response(data: Dict[str, Any], model: str) -> CompletionResponse:
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise InvalidResponseError("invalid API response: no choices in response")
        choice = choices[0]
        message = choice.get("message") if isinstance(choice.get("message"), dict) else {}
        usage = data.get("usage") if isinstance(data.get("usage"), dict) else {}
        return CompletionResponse(
            content=str(message.get("content") or ""),
            finish_reason=str(choice.get("finish_reason") or ""),
            model=str(data.get("model") or model),
            usage=TokenUsage(
                prompt_tokens=int(usage.get("prompt_tokens") or 0),
                completion_tokens=int(usage.get("completion_tokens") or 0),
                total_tokens=int(usage.get("total_tokens") or 0),
            ),
        )


class MiniMaxProvider(ChatCompletionsProvider):
    """MiniMax chat API; failures may also arrive in a ``base_resp`` block."""

    name = "minimax"
    default_model = MINIMAX_DEFAULT_MODEL
    models = ["abab6.5s-chat", "abab6.5-chat", "abab5.5s-chat", "abab5.5-chat"]

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("base_url", MINIMAX_BASE_URL)
        kwargs.setdefault("model", MINIMAX_DEFAULT_MODEL)
        super().__init__(**kwargs)

    def _parse(self, status: int, body: str, model: str) -> CompletionResponse:
        if status != 200:
            raise APIError(self.name, status, body)
        data = self._decode(status, body)
        base_resp = data.get("base_resp")
        if isinstance(base_resp, dict):
            code = base_resp.get("status_code") or 0
            if code:
                raise APIError(self.name, int(code), str(base_resp.get("status_msg", "")))
        response = self._to_response(data, model)
        response.model = model
        return response


class OpenAIProvider(ChatCompletionsProvider):
    name = "openai"
    default_model = OPENAI_DEFAULT_MODEL
    models = ["gpt-4", "gpt-4-turbo", "gpt-4o", "gpt-3.5-turbo"]

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("base_url", OPENAI_BASE_URL)
        kwargs.setdefault("model", OPENAI_DEFAULT_MODEL)
        super().__init__(**kwargs)


class CustomProvider(ChatCompletionsProvider):
    """Any OpenAI-compatible endpoint; the base URL is mandatory."""

    name = "custom"

    def _validate(self) -> None:
        if not self.base_url:
            raise ValidationError("base_url", "custom provider requires base_url")

    def available_models(self) -> List[str]:
        return [self.model] if self.model else []


class ProviderFactory:
    """Creates providers by name, applying the configured key, URL and model."""

    def __init__(self, api_key: str = "", base_url: str = "", model: str = "") -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.model = model

    def create(self, provider_name: str) -> Provider:
        name = (provider_name or "").lower()
        if name == "minimax":
            provider: ChatCompletionsProvider = MiniMaxProvider()
        elif name == "openai":
            provider = OpenAIProvider()
        elif name in {"custom", ""}:
            if not self.base_url:
                raise ValidationError("base_url", "custom provider requires base_url")
            provider = CustomProvider(base_url=self.base_url)
        else:
            raise ProviderNotFoundError(provider_name)
        if self.base_url:
            provider.base_url = self.base_url.rstrip("/")
        if self.api_key:
            provider.set_api_key(self.api_key)
        if self.model:
            provider.set_model(self.model)
        return provider


def detect_provider(url: str) -> str:
    """Guess the provider from a base URL (``minimax``, ``openai`` or ``custom``)."""
    lowered = (url or "").lower()
    if "minimax" in lowered:
        return "minimax"
    if "openai" in lowered:
        return "openai"
    return "custom"


__all__ = [
    "ChatCompletionsProvider",
    "CompletionRequest",
    "CompletionResponse",
    "CustomProvider",
    "MiniMaxProvider",
    "OpenAIProvider",
    "Provider",
    "ProviderFactory",
    "TokenUsage",
    "detect_provider",
]
