"""Scriptable completion provider for AI tests."""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

from fsct.ai.context import CallContext
from fsct.ai.providers import CompletionRequest, CompletionResponse, Provider

Outcome = Union[str, BaseException]


class FakeProvider(Provider):
    """Replays ``outcomes`` in order: strings become responses, exceptions are raised."""

    name = "fake"

    def __init__(self, outcomes: Sequence[Outcome]) -> None:
        self.outcomes: List[Outcome] = list(outcomes)
        self.requests: List[CompletionRequest] = []
        self.model = ""
        self.api_key = ""

    @property
    def calls(self) -> int:
        return len(self.requests)

    def set_api_key(self, key: str) -> None:
        self.api_key = key

    def set_model(self, model: str) -> None:
        self.model = model

    def available_models(self) -> List[str]:
        return ["fake-1"]

    def complete(
        self, request: CompletionRequest, context: Optional[CallContext] = None
    ) -> CompletionResponse:
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return CompletionResponse(content=outcome, model="fake-1")


__all__ = ["FakeProvider"]
