"""analysis_options.yaml configuration checks (LINT-*).

The rules are looked up in the text of the project's root
``analysis_options.yaml``; source files are only consulted for
``// ignore:`` comments.
"""

from __future__ import annotations

import re
from typing import List, Sequence

from ..logging import get_logger
from ..models import SEVERITY_INFO, SEVERITY_WARNING, Finding
from ..project import Project
from .base import Check

_LOGGER = get_logger("checks.linting")

ANALYSIS_OPTIONS = "analysis_options.yaml"
MAX_IGNORE_COMMENTS = 10
_IGNORE_COMMENT = re.compile(r"//\s*ignore:")


class AnalysisOptionsCheck(Check):
    id = "LINT-001"
    name = "Analysis Options File Presence"

    def run(self, project: Project) -> List[Finding]:
        if project.analysis_options is not None:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "No analysis_options.yaml found",
                file="project root",
                suggestion="Create analysis_options.yaml for lint rules configuration",
            )
        ]


class LintRuleCheck(Check):
    """Emits one finding when ``analysis_options.yaml`` mentions none of ``markers``."""

    markers: Sequence[str] = ()
    severity = SEVERITY_INFO
    message = ""
    suggestion = ""

    def run(self, project: Project) -> List[Finding]:
        options = project.analysis_options
        if options is None:
            _LOGGER.debug("%s: no analysis_options.yaml to inspect", self.id)
        elif any(marker in options for marker in self.markers):
            return []
        else:
            _LOGGER.info(
                "%s: analysis_options.yaml mentions none of %s", self.id, ", ".join(self.markers)
            )
        return [
            self.finding(
                self.severity,
                self.message,
                file=ANALYSIS_OPTIONS,
                suggestion=self.suggestion,
            )
        ]


class LinterRulesCheck(LintRuleCheck):
    id = "LINT-002"
    name = "Linter Rules Configuration"
    markers = ("linter:", "rules:")
    severity = SEVERITY_WARNING
    message = "No linter rules configured"
    suggestion = "Add linter rules to enforce code quality standards"


class StrongModeCheck(LintRuleCheck):
    id = "LINT-003"
    name = "Strong Mode Analysis"
    markers = ("strong-mode", "implicit-casts")
    message = "Strong mode analysis not explicitly configured"
    suggestion = "Enable strong mode for better type safety"


class FileNamingCheck(LintRuleCheck):
    id = "LINT-004"
    name = "File Naming Rules"
    markers = ("file_names", "camel_case_types")
    message = "File naming rules not configured"
    suggestion = "Add file naming rules (camel_case_types, library_names)"


class StyleGuideCheck(LintRuleCheck):
    id = "LINT-005"
    name = "Style Guide Rules"
    markers = ("lines_longer_than_80_chars", "avoid_as", "prefer_const_constructors")
    message = "Style guide rules not fully configured"
    suggestion = "Add style rules like prefer_const_constructors, avoid_as"


class PublicApiDocCheck(LintRuleCheck):
    id = "LINT-006"
    name = "Public API Documentation Rules"
    markers = ("public_member_api_docs", "comment_references")
    message = "Public API documentation rules not configured"
    suggestion = "Add public_member_api_docs rule for documentation enforcement"


class IgnoreCommentsCheck(Check):
    id = "LINT-007"
    name = "Ignore Comments Configuration"

    def run(self, project: Project) -> List[Finding]:
        if len(project.scanner.scan(_IGNORE_COMMENT)) <= MAX_IGNORE_COMMENTS:
            return []
        return [
            self.finding(
                SEVERITY_WARNING,
                "Many ignore comments found in project",
                file="source files",
                suggestion="Review and address lint violations instead of ignoring them",
            )
        ]


LINTING_CHECKS = (
    AnalysisOptionsCheck,
    LinterRulesCheck,
    StrongModeCheck,
    FileNamingCheck,
    StyleGuideCheck,
    PublicApiDocCheck,
    IgnoreCommentsCheck,
)

__all__ = [
    "AnalysisOptionsCheck",
    "FileNamingCheck",
    "IgnoreCommentsCheck",
    "LINTING_CHECKS",
    "LintRuleCheck",
    "LinterRulesCheck",
    "PublicApiDocCheck",
    "StrongModeCheck",
    "StyleGuideCheck",
]
