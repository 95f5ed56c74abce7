"""Check catalog, registry and plugin discovery."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..ai.client import AIClient
from ..config import FsctConfig
from ..logging import get_logger
from ..models import category_for_id
from .ai import AI_CHECKS, ai_checks
from .android import ANDROID_CHECKS
from .base import Check
from .code import CODE_CHECKS
from .docs import DOCS_CHECKS
from .flutter import FLUTTER_CHECKS
from .ios import IOS_CHECKS
from .linting import LINTING_CHECKS
from .perf import PERF_CHECKS
from .policy import POLICY_CHECKS
from .reviewer import (
    LoginVerificationCheck,
    NoCredentialsCheck,
    PlaceholderEmailCheck,
    WeakPasswordCheck,
    reviewer_checks,
)
from .security import SECURITY_CHECKS
from .testing import TESTING_CHECKS

_LOGGER = get_logger("checks")

_ENTRY_POINT_GROUP = "fsct.checks"

CATEGORY_PREFIXES: Tuple[str, ...] = (
    "AND",
    "IOS",
    "FLT",
    "SEC",
    "POL",
    "COD",
    "TST",
    "LINT",
    "DOC",
    "PERF",
    "REV",
    "AI",
)

_BUILTIN_FACTORIES: Tuple[Callable[[], Check], ...] = (
    *ANDROID_CHECKS,
    *IOS_CHECKS,
    *FLUTTER_CHECKS,
    *SECURITY_CHECKS,
    *POLICY_CHECKS,
    *CODE_CHECKS,
    *TESTING_CHECKS,
    *LINTING_CHECKS,
    *DOCS_CHECKS,
    *PERF_CHECKS,
)

_REVIEWER_CLASSES = (NoCredentialsCheck, PlaceholderEmailCheck, WeakPasswordCheck, LoginVerificationCheck)


class CheckRegistry:
    """Checks keyed by id; registering an existing id replaces the previous check."""

    def __init__(self, checks: Iterable[Check] = ()) -> None:
        self._checks: Dict[str, Check] = {}
        for check in checks:
            self.register(check)

    def register(self, check: Check) -> None:
        if not isinstance(check, Check):
            raise TypeError(f"Expected a Check instance, got {type(check).__name__}")
        if not check.id:
            raise ValueError(f"{type(check).__name__} has no id")
        self._checks[check.id] = check

    def get(self, check_id: str) -> Optional[Check]:
        return self._checks.get(check_id)

    def all(self) -> List[Check]:
        return list(self._checks.values())

    def by_prefix(self, prefix: str) -> List[Check]:
        prefix = prefix.rstrip("-") + "-"
        return [check for check in self._checks.values() if check.id.startswith(prefix)]

    @staticmethod
    def categories() -> Tuple[str, ...]:
        return CATEGORY_PREFIXES

    def ids(self) -> List[str]:
        return list(self._checks)

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, check_id: object) -> bool:
        return check_id in self._checks


def build_registry(
    config: Optional[FsctConfig] = None,
    ai_client: Optional[AIClient] = None,
) -> CheckRegistry:
    """Register the static catalog, plugins, then reviewer and AI checks.

    Reviewer checks need a ``reviewer`` block in ``.fsct.yaml``; AI checks
    need a usable ``ai_client``.
    """
    registry = CheckRegistry(factory() for factory in _BUILTIN_FACTORIES)
    for check in _plugin_checks():
        registry.register(check)
    if config is not None and config.reviewer is not None:
        for check in reviewer_checks(config.reviewer):
            registry.register(check)
    for check in ai_checks(ai_client):
        registry.register(check)
    _LOGGER.debug("Registered %d checks", len(registry))
    return registry


def select_checks(
    registry: CheckRegistry,
    *,
    android: bool = True,
    ios: bool = True,
    include: Sequence[str] = (),
    skip: Sequence[str] = (),
) -> List[Check]:
    """Checks to run for the requested platforms and id allow/skip lists."""
    allowed = set(include)
    skipped = set(skip)
    selected: List[Check] = []
    for check in registry.all():
        if not android and check.id.startswith("AND-"):
            continue
        if not ios and check.id.startswith("IOS-"):
            continue
        if allowed and check.id not in allowed:
            continue
        if check.id in skipped:
            continue
        selected.append(check)
    return selected


def catalog() -> List[Tuple[str, str, str]]:
    """``(id, name, category)`` for every built-in check, AI and reviewer ones included."""
    classes = [*_BUILTIN_FACTORIES, *_REVIEWER_CLASSES, *AI_CHECKS]
    return [(cls.id, cls.name, category_for_id(cls.id)) for cls in classes]


def _plugin_checks() -> List[Check]:
    checks: List[Check] = []
    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - defensive guard
            raise RuntimeError(f"Failed to load check entry point '{entry.name}': {exc}") from exc
        checks.append(_coerce_check(loaded))
    return checks


def _coerce_check(obj: object) -> Check:
    if isinstance(obj, Check):
        return obj
    if isinstance(obj, type) and issubclass(obj, Check):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, Check):
            return instance
    raise TypeError("Check entry point must be a Check subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    try:
        entry_points = metadata.entry_points()
    except Exception:  # pragma: no cover - defensive guard
        return []

    if hasattr(entry_points, "select"):
        return entry_points.select(group=_ENTRY_POINT_GROUP)  # type: ignore[return-value]

    return entry_points.get(_ENTRY_POINT_GROUP, [])  # type: ignore[return-value]


__all__ = [
    "CATEGORY_PREFIXES",
    "Check",
    "CheckRegistry",
    "build_registry",
    "catalog",
    "select_checks",
]
