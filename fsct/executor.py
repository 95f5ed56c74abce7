"""Runs checks against a project snapshot and aggregates their findings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from .checks.base import Check
from .logging import get_logger
from .models import SEVERITY_INFO, Finding, Summary, severity_rank
from .project import Project

_LOGGER = get_logger("executor")


@dataclass
class ExecutionResult:
    findings: List[Finding] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    checks_run: int = 0


def run_checks(project: Project, checks: Sequence[Check]) -> ExecutionResult:
    """Execute ``checks`` in order and return sorted findings with their summary.

    Checks flagged ``deferred`` (the AI family) run last and receive the
    findings collected so far. A check that raises contributes one INFO
    finding describing the failure instead of aborting the run.
    """
    if not project.exists:
        _LOGGER.warning("Project path %s does not exist; no checks run", project.root)
        return ExecutionResult()

    immediate = [check for check in checks if not getattr(check, "deferred", False)]
    deferred = [check for check in checks if getattr(check, "deferred", False)]

    findings: List[Finding] = []
    for check in immediate:
        findings.extend(_run_one(check, project, (), len(checks)))
    static_findings = list(findings)
    for check in deferred:
        findings.extend(_run_one(check, project, static_findings, len(checks)))

    ordered = sort_findings(findings)
    summary = Summary.from_findings(ordered, len(checks))
    _LOGGER.debug(
        "Ran %d checks: %d high, %d warning, %d info",
        len(checks),
        summary.high,
        summary.warning,
        summary.info,
    )
    return ExecutionResult(findings=ordered, summary=summary, checks_run=len(checks))


def sort_findings(findings: Iterable[Finding]) -> List[Finding]:
    """Group by severity (HIGH first), then by id; equal keys keep their order."""
    return sorted(findings, key=lambda finding: (-_rank(finding.severity), finding.id))


def _run_one(
    check: Check, project: Project, prior: Sequence[Finding], total_checks: int
) -> List[Finding]:
    try:
        if getattr(check, "deferred", False):
            return list(
                check.run_after(project, prior, total_checks=total_checks)  # type: ignore[attr-defined]
            )
        return list(check.run(project))
    except Exception as exc:  # noqa: BLE001 - check faults become findings
        _LOGGER.warning("Check %s failed: %s", check.id, exc)
        _LOGGER.debug("Check %s traceback", check.id, exc_info=True)
        return [
            Finding(
                id=check.id,
                severity=SEVERITY_INFO,
                title=f"{check.name or check.id} Failed",
                message=f"Check {check.id} failed to run: {type(exc).__name__}: {exc}",
                suggestion="Report this failure to the check maintainer.",
            )
        ]


def _rank(severity: str) -> int:
    try:
        return severity_rank(severity)
    except ValueError:
        return -1


__all__ = ["ExecutionResult", "run_checks", "sort_findings"]
