"""Markdown compliance certificate (``fsct cert``)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .formatters.base import Clock, utc_now
from .models import SEVERITY_HIGH, Finding, Summary
from .project import Project
from .scoring import ComplianceScore, calculate_score
from .templating import render_template


@dataclass
class Certificate:
    app_name: str
    version: str
    issued: str
    score: ComplianceScore
    summary: Summary
    blocking: List[Finding]

    @property
    def passed(self) -> bool:
        return self.summary.high == 0

    def render(self) -> str:
        return render_template(
            "certificate.md.j2",
            app_name=self.app_name,
            version=self.version,
            issued=self.issued,
            score=self.score,
            summary=self.summary,
            blocking=self.blocking,
        )


def build_certificate(
    project: Project,
    findings: Sequence[Finding],
    summary: Summary,
    *,
    clock: Optional[Clock] = None,
) -> Certificate:
    pubspec = project.pubspec
    app_name = (pubspec.name if pubspec else "") or project.root.name
    version = (pubspec.version if pubspec else "") or "unversioned"
    issued = (clock or utc_now)().strftime("%Y-%m-%d")
    return Certificate(
        app_name=app_name,
        version=version,
        issued=issued,
        score=calculate_score(findings),
        summary=summary,
        blocking=[finding for finding in findings if finding.severity == SEVERITY_HIGH],
    )


__all__ = ["Certificate", "build_certificate"]
