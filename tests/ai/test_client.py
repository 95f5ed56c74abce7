from __future__ import annotations

import time

import pytest

from fsct.ai.client import AIClient, ClientConfig
from fsct.ai.context import CallContext
from fsct.ai.errors import (
    APIError,
    APITimeoutError,
    RequestCanceledError,
    RetriesExhaustedError,
    ValidationError,
)
from fsct.ai.providers import CompletionRequest
from tests._fixtures.fake_provider import FakeProvider

FAST = ClientConfig(timeout=5.0, max_retries=3, retry_delay=0.01, retry_backoff=1.0)


def _request() -> CompletionRequest:
    return CompletionRequest(system_prompt="sys", user_prompt="user")


def test_retries_server_errors_until_success() -> None:
    provider = FakeProvider(
        [
            APIError("fake", 500, "boom"),
            APIError("fake", 500, "boom"),
            "all good",
        ]
    )
    client = AIClient(provider, FAST)

    response = client.complete(_request())

    assert provider.calls == 3
    assert response.content == "all good"


def test_non_retryable_error_is_raised_immediately() -> None:
    provider = FakeProvider([APIError("fake", 400, "bad request")])
    client = AIClient(provider, FAST)

    with pytest.raises(APIError) as excinfo:
        client.complete(_request())

    assert excinfo.value.status_code == 400
    assert provider.calls == 1


def test_validation_error_is_not_retried() -> None:
    provider = FakeProvider([ValidationError("base_url", "missing")])

    with pytest.raises(ValidationError):
        AIClient(provider, FAST).complete(_request())

    assert provider.calls == 1


def test_retries_exhausted_reports_attempts_and_last_error() -> None:
    provider = FakeProvider([APIError("fake", 503, "unavailable")])
    client = AIClient(provider, ClientConfig(max_retries=2, retry_delay=0.01, retry_backoff=1.0))

    with pytest.raises(RetriesExhaustedError) as excinfo:
        client.complete(_request())

    assert provider.calls == 3
    assert excinfo.value.attempts == 3
    assert isinstance(excinfo.value.last_error, APIError)


def test_rate_limit_and_timeouts_are_retryable() -> None:
    provider = FakeProvider([APIError("fake", 429, "slow down"), APITimeoutError(), "ok"])

    assert AIClient(provider, FAST).complete(_request()).content == "ok"
    assert provider.calls == 3


def test_cancelled_context_stops_before_first_attempt() -> None:
    provider = FakeProvider(["unused"])
    context = CallContext()
    context.cancel()

    with pytest.raises(RequestCanceledError):
        AIClient(provider, FAST).complete(_request(), context)

    assert provider.calls == 0


def test_expired_deadline_during_backoff_is_a_timeout() -> None:
    provider = FakeProvider([APIError("fake", 500, "boom")])
    client = AIClient(
        provider, ClientConfig(max_retries=3, retry_delay=5.0, retry_backoff=1.0)
    )

    with pytest.raises(APITimeoutError):
        client.complete(_request(), CallContext.with_timeout(0.05))

    assert provider.calls == 1


def test_retry_delay_grows_and_is_capped() -> None:
    client = AIClient(
        FakeProvider(["x"]),
        ClientConfig(retry_delay=1.0, retry_backoff=2.0, max_retry_delay=5.0),
    )

    assert [client.retry_delay(attempt) for attempt in range(5)] == [1.0, 2.0, 4.0, 5.0, 5.0]


def test_complete_simple_returns_content() -> None:
    provider = FakeProvider(["hello"])

    assert AIClient(provider, FAST).complete_simple("sys", "user") == "hello"
    assert provider.requests[0].system_prompt == "sys"


def test_default_timeout_leaves_caller_context_untouched() -> None:
    provider = FakeProvider(["first", "second"])
    client = AIClient(provider, ClientConfig(timeout=0.05, max_retries=0))
    context = CallContext()

    assert client.complete(_request(), context).content == "first"
    assert context.deadline is None

    time.sleep(0.1)

    assert client.complete(_request(), context).content == "second"
    assert provider.calls == 2


def test_child_context_shares_cancellation() -> None:
    parent = CallContext()
    child = parent.child(30.0)

    parent.cancel()

    assert child.cancelled
    assert child.deadline is not None
    assert parent.deadline is None
