"""Self-contained HTML report."""

from __future__ import annotations

from typing import Sequence

from ..models import Finding, Summary
from ..scoring import calculate_score
from ..templating import render_template
from .base import Formatter


class HTMLFormatter(Formatter):
    name = "html"
    extension = "html"
    template_name = "report.html.j2"

    def format(self, findings: Sequence[Finding], summary: Summary) -> str:
        now = self.now()
        return render_template(
            self.template_name,
            generated_at=f"{now:%B} {now.day}, {now:%Y %H:%M}",
            summary=summary,
            findings=list(findings),
            score=calculate_score(findings),
        )


__all__ = ["HTMLFormatter"]
