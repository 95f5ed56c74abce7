"""Report formatters keyed by the ``--format`` name."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ..logging import get_logger
from .base import Clock, Formatter, utc_now
from .console import ConsoleFormatter
from .html import HTMLFormatter
from .prompt import PromptFormatter
from .sarif import GitHubSummaryFormatter, SARIFFormatter
from .structured import JSONFormatter, YAMLFormatter, load_report

_LOGGER = get_logger("formatters")

DEFAULT_REPORT_BASENAME = "fsct-report"

_FORMATTERS: Dict[str, Callable[..., Formatter]] = {
    "console": ConsoleFormatter,
    "json": JSONFormatter,
    "yaml": YAMLFormatter,
    "html": HTMLFormatter,
    "sarif": SARIFFormatter,
    "github": GitHubSummaryFormatter,
    "prompt": PromptFormatter,
}

FORMAT_NAMES = tuple(_FORMATTERS)


def get_formatter(name: str, **options: Any) -> Formatter:
    """Instantiate the formatter registered under ``name``.

    Extra ``options`` are forwarded to the constructor (``clock`` for all of
    them, ``project``/``reviewer``/``template_type`` for the prompt formatter).
    """
    key = (name or "console").lower()
    try:
        factory = _FORMATTERS[key]
    except KeyError as exc:
        raise ValueError(
            f"Unknown format '{name}'. Choose one of: {', '.join(FORMAT_NAMES)}"
        ) from exc
    if key != "prompt":
        options = {k: v for k, v in options.items() if k == "clock"}
    return factory(**options)


def report_path(basename: Optional[str], extension: str) -> Path:
    name = basename or DEFAULT_REPORT_BASENAME
    return Path(f"{name}.{extension}" if extension else name)


def write_report(content: str, basename: Optional[str], extension: str) -> Path:
    """Write ``content`` to ``<basename>.<extension>`` and return the path."""
    path = report_path(basename, extension)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    _LOGGER.debug("Wrote report to %s", path)
    return path


__all__ = [
    "Clock",
    "ConsoleFormatter",
    "DEFAULT_REPORT_BASENAME",
    "FORMAT_NAMES",
    "Formatter",
    "GitHubSummaryFormatter",
    "HTMLFormatter",
    "JSONFormatter",
    "PromptFormatter",
    "SARIFFormatter",
    "YAMLFormatter",
    "get_formatter",
    "load_report",
    "report_path",
    "write_report",
]
