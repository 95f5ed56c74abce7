"""Jinja2 environment shared by the HTML report, prompts, checklist and certificate."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATES_DIR = Path(__file__).with_name("templates")


@lru_cache(maxsize=None)
def get_environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    loader = FileSystemLoader(str(templates_dir))
    return Environment(
        loader=loader,
        autoescape=select_autoescape(enabled_extensions=("html", "html.j2"), default_for_string=False),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def render_template(name: str, **context: Any) -> str:
    """Render ``name`` from the bundled templates; ``*.html.j2`` output is autoescaped."""
    return get_environment().get_template(name).render(**context)


__all__ = ["TEMPLATES_DIR", "get_environment", "render_template"]
