"""SARIF 2.1.0 output and the GitHub checks summary."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from ..models import REPORT_VERSION, SEVERITY_HIGH, SEVERITY_WARNING, Finding, Summary
from .base import Formatter

SARIF_SCHEMA = (
    "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/sarif-schema-2.1.0.json"
)
SARIF_VERSION = "2.1.0"
TOOL_NAME = "FSCT"

_LEVELS = {SEVERITY_HIGH: "error", SEVERITY_WARNING: "warning"}


def sarif_level(severity: str) -> str:
    return _LEVELS.get(severity, "note")


class SARIFFormatter(Formatter):
    name = "sarif"
    extension = "sarif"

    def format(self, findings: Sequence[Finding], summary: Summary) -> str:
        results: List[Dict[str, Any]] = [self._result(finding) for finding in findings]
        run: Dict[str, Any] = {
            "tool": {
                "driver": {
                    "name": TOOL_NAME,
                    "version": REPORT_VERSION,
                    "semanticVersion": REPORT_VERSION,
                }
            },
            "results": results,
        }
        document = {"$schema": SARIF_SCHEMA, "version": SARIF_VERSION, "runs": [run]}
        return json.dumps(document, indent=2, ensure_ascii=False) + "\n"

    @staticmethod
    def _result(finding: Finding) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "ruleId": finding.id,
            "level": sarif_level(finding.severity),
            "message": {"text": finding.message or finding.title},
        }
        if finding.file:
            physical: Dict[str, Any] = {"artifactLocation": {"uri": finding.file}}
            if finding.line > 0:
                physical["region"] = {"startLine": finding.line}
            result["locations"] = [{"physicalLocation": physical}]
        return result


class GitHubSummaryFormatter(Formatter):
    """``{title, summary}`` payload for a checks-API run."""

    name = "github"
    extension = "json"

    def format(self, findings: Sequence[Finding], summary: Summary) -> str:
        payload = {"title": "FSCT Compliance Report", "summary": github_summary(summary)}
        return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def github_summary(summary: Summary) -> str:
    if summary.high > 0:
        return (
            "## Compliance Issues Found\n\n"
            f"**High Severity:** {summary.high}\n"
            f"**Warning:** {summary.warning}\n"
            f"**Info:** {summary.info}\n\n"
            "### Action Required\n\n"
            f"{summary.high} high severity issues need to be addressed before submitting to the app store."
        )
    if summary.warning > 0:
        return (
            "## Compliance Report\n\n"
            "**High Severity:** 0\n"
            f"**Warning:** {summary.warning}\n"
            f"**Info:** {summary.info}\n\n"
            "### Recommendations\n\n"
            f"{summary.warning} warning issues should be reviewed."
        )
    return (
        "## Compliance Passed\n\n"
        "All checks passed! Your app is ready for submission.\n\n"
        f"**Passed:** {summary.passed}\n"
        "**High Severity:** 0\n"
        "**Warning:** 0\n"
        f"**Info:** {summary.info}"
    )


__all__ = [
    "GitHubSummaryFormatter",
    "SARIFFormatter",
    "SARIF_SCHEMA",
    "SARIF_VERSION",
    "github_summary",
    "sarif_level",
]
