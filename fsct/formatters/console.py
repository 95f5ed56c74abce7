"""Plain-text report for terminals."""

from __future__ import annotations

from typing import List, Sequence

from ..models import SEVERITY_HIGH, SEVERITY_WARNING, Finding, Summary
from .base import Formatter

_ICONS = {SEVERITY_HIGH: "×", SEVERITY_WARNING: "!"}


class ConsoleFormatter(Formatter):
    name = "console"
    extension = ""

    def format(self, findings: Sequence[Finding], summary: Summary) -> str:
        lines: List[str] = [
            "FSCT Report",
            "────────────",
            (
                f"Summary  High {summary.high}  |  Warning {summary.warning}  |  "
                f"Info {summary.info}  |  Passed {summary.passed}"
            ),
            "",
        ]
        if not findings:
            lines.append("No issues found. All checks passed.")
            return "\n".join(lines) + "\n"

        lines.extend(["Findings", "────────"])
        for finding in findings:
            icon = _ICONS.get(finding.severity, "•")
            lines.append("")
            lines.append(f"{icon} {finding.id}  ({finding.severity.upper()})")
            lines.append(f"  {finding.title}")
            if finding.message:
                lines.append(f"  {finding.message}")
            if finding.file:
                location = f"{finding.file}:{finding.line}" if finding.line > 0 else finding.file
                lines.append(f"  {location}")
            if finding.suggestion:
                lines.append(f"  Suggestion: {finding.suggestion}")
        return "\n".join(lines) + "\n"


__all__ = ["ConsoleFormatter"]
