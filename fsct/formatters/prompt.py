"""Markdown prompt bundle for pasting into a chat assistant."""

from __future__ import annotations

from typing import Optional, Sequence

from ..config import ReviewerConfig
from ..models import Finding, Summary
from ..project import Project
from ..prompting import TEMPLATE_COMPREHENSIVE, PromptBuilder, build_prompt_data
from .base import Clock, Formatter


class PromptFormatter(Formatter):
    """Wraps :class:`PromptBuilder`; enriches the prompt when a project is attached."""

    name = "prompt"
    extension = "md"

    def __init__(
        self,
        *,
        project: Optional[Project] = None,
        reviewer: Optional[ReviewerConfig] = None,
        template_type: str = TEMPLATE_COMPREHENSIVE,
        with_header: bool = True,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__(clock=clock)
        self.project = project
        self.reviewer = reviewer
        self.builder = PromptBuilder(template_type)
        self.with_header = with_header

    def format(self, findings: Sequence[Finding], summary: Summary) -> str:
        total = summary.passed + summary.high + summary.warning + summary.info
        data = build_prompt_data(
            findings,
            total_checks=total,
            project=self.project,
            reviewer=self.reviewer,
        )
        if self.with_header:
            return self.builder.generate_with_header(data)
        return self.builder.generate(data)


__all__ = ["PromptFormatter"]
