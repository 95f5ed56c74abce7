"""AI-assisted compliance analysis (AI-*).

Each check sends the privacy-safe project metadata to the configured
completion endpoint with its own system prompt and converts the parsed
analysis into findings. They run after the static checks so the metadata
can summarise what those found.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..ai.client import AIClient
from ..ai.context import CallContext
from ..ai.errors import AIError
from ..ai.metadata import extract_metadata
from ..ai.prompts import build_user_prompt, system_prompt_for
from ..ai.providers import CompletionRequest
from ..ai.response import AIAnalysis, parse_response
from ..logging import get_logger
from ..models import SEVERITY_HIGH, SEVERITY_INFO, SEVERITY_WARNING, Finding
from ..project import Project
from .base import Check

_LOGGER = get_logger("checks.ai")

AI_CHECK_TIMEOUT = 60.0
AI_MAX_TOKENS = 2000
AI_TEMPERATURE = 0.3
OFFLINE_SUGGESTION = (
    "To enable AI analysis, set AI_API_KEY environment variable or use --ai-key flag. "
    "Alternatively, use --format prompt to generate a prompt for manual AI analysis."
)


class AICheck(Check):
    """One remote analysis pass; subclasses only pick the id and name."""

    deferred = True

    def __init__(self, client: AIClient, *, timeout: float = AI_CHECK_TIMEOUT) -> None:
        self.client = client
        self.timeout = timeout

    def run(self, project: Project) -> List[Finding]:
        return self.run_after(project, ())

    def run_after(
        self, project: Project, findings: Sequence[Finding], *, total_checks: int = 0
    ) -> List[Finding]:
        """Analyse ``project`` with the static ``findings`` folded into the metadata.

        ``total_checks`` is the number of checks in the run; the passed count in
        the metadata is derived from it.
        """
        metadata = extract_metadata(project, findings, total_checks=total_checks)
        request = CompletionRequest(
            system_prompt=system_prompt_for(self.id),
            user_prompt=build_user_prompt(self.name, metadata),
            max_tokens=AI_MAX_TOKENS,
            temperature=AI_TEMPERATURE,
        )
        _LOGGER.debug("%s: sending %d bytes of metadata", self.id, metadata.size())
        try:
            response = self.client.complete(request, CallContext.with_timeout(self.timeout))
        except AIError as exc:
            _LOGGER.debug("%s: AI analysis failed: %s", self.id, exc)
            return [self._unavailable(exc)]
        return self.to_findings(parse_response(response.content))

    def to_findings(self, analysis: AIAnalysis) -> List[Finding]:
        findings: List[Finding] = []
        for index, insight in enumerate(analysis.insights, start=1):
            suggestion = next(
                (item.action for item in analysis.suggestions if item.priority == index), ""
            )
            findings.append(
                self.finding(
                    _severity(insight.severity),
                    insight.description,
                    title=f"[{self.name}] {insight.title}",
                    suggestion=suggestion,
                    finding_id=f"{self.id}-{index:03d}",
                )
            )
        if findings:
            return findings

        for index, item in enumerate(analysis.suggestions, start=1):
            findings.append(
                self.finding(
                    SEVERITY_INFO,
                    item.issue,
                    title=f"[{self.name}] Suggestion {index}",
                    suggestion=item.action,
                    finding_id=f"{self.id}-{index:03d}",
                )
            )
        if findings:
            return findings

        readiness = analysis.store_readiness
        return [
            self.finding(
                SEVERITY_INFO,
                f"AI analysis completed with risk level: {analysis.risk_level}",
                title=f"[{self.name}] Analysis Complete",
                suggestion=(
                    f"Store readiness - App Store: {_flag(readiness.app_store)}, "
                    f"Play Store: {_flag(readiness.play_store)}"
                ),
                finding_id=f"{self.id}-001",
            )
        ]

    def _unavailable(self, error: BaseException) -> Finding:
        return self.finding(
            SEVERITY_INFO,
            f"Could not perform AI analysis: {error}",
            title=f"[{self.name}] AI Analysis Unavailable",
            suggestion=OFFLINE_SUGGESTION,
        )


class PermissionJustificationCheck(AICheck):
    id = "AI-001"
    name = "AI Permission Justification Analysis"


class PolicyComplianceCheck(AICheck):
    id = "AI-002"
    name = "AI Policy Compliance Analysis"


class DependencyRiskCheck(AICheck):
    id = "AI-003"
    name = "AI Dependency Risk Analysis"


class StoreGuidanceCheck(AICheck):
    id = "AI-004"
    name = "AI Store-Specific Guidance"


class ReviewerNotesCheck(AICheck):
    id = "AI-005"
    name = "AI Reviewer Notes Generation"


AI_CHECKS = (
    PermissionJustificationCheck,
    PolicyComplianceCheck,
    DependencyRiskCheck,
    StoreGuidanceCheck,
    ReviewerNotesCheck,
)


def ai_checks(client: Optional[AIClient]) -> List[AICheck]:
    """Instantiate the AI checks, or nothing when no usable client exists."""
    if client is None or not client.is_available:
        return []
    return [factory(client) for factory in AI_CHECKS]


def _severity(value: str) -> str:
    if value == "high":
        return SEVERITY_HIGH
    if value == "warning":
        return SEVERITY_WARNING
    return SEVERITY_INFO


def _flag(value: bool) -> str:
    return "true" if value else "false"


__all__ = [
    "AICheck",
    "AI_CHECKS",
    "DependencyRiskCheck",
    "PermissionJustificationCheck",
    "PolicyComplianceCheck",
    "ReviewerNotesCheck",
    "StoreGuidanceCheck",
    "ai_checks",
]
