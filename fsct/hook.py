"""Git pre-commit hook installer (``fsct hook``)."""

from __future__ import annotations

import stat
from pathlib import Path

from .logging import get_logger

_LOGGER = get_logger("hook")

HOOK_MARKER = "# fsct pre-commit hook"

HOOK_TEMPLATE = """#!/bin/sh
{marker}
# Blocks the commit when fsct reports HIGH severity findings.
fsct check "$(git rev-parse --show-toplevel)" --severity {severity}
status=$?
if [ "$status" -eq 1 ]; then
    echo "fsct: HIGH severity compliance issues found; commit blocked." >&2
    echo "fsct: fix them or bypass with 'git commit --no-verify'." >&2
    exit 1
fi
if [ "$status" -ne 0 ]; then
    echo "fsct: check could not run (exit $status); commit allowed." >&2
fi
exit 0
"""


class HookExistsError(RuntimeError):
    """Raised when a pre-commit hook not written by fsct is already installed."""


def render_hook(severity: str = "warning") -> str:
    return HOOK_TEMPLATE.format(marker=HOOK_MARKER, severity=severity.lower())


def install_hook(repo_path: Path, *, severity: str = "warning", force: bool = False) -> Path:
    """Write ``.git/hooks/pre-commit`` under ``repo_path`` and mark it executable."""
    git_dir = Path(repo_path) / ".git"
    if not git_dir.is_dir():
        raise FileNotFoundError(f"{repo_path} is not a git repository (no .git directory)")

    hooks_dir = git_dir / "hooks"
    hooks_dir.mkdir(parents=True, exist_ok=True)
    hook_path = hooks_dir / "pre-commit"

    if hook_path.exists() and not force:
        existing = hook_path.read_text(encoding="utf-8", errors="replace")
        if HOOK_MARKER not in existing:
            raise HookExistsError(
                f"{hook_path} already exists and was not installed by fsct; use --force to replace it"
            )

    hook_path.write_text(render_hook(severity), encoding="utf-8")
    mode = hook_path.stat().st_mode
    hook_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    _LOGGER.debug("Installed pre-commit hook at %s", hook_path)
    return hook_path


__all__ = ["HOOK_MARKER", "HookExistsError", "install_hook", "render_hook"]
