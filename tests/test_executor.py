"""Tests for fsct.executor."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from fsct.checks.base import Check
from fsct.executor import run_checks, sort_findings
from fsct.models import Finding
from fsct.project import Project, build_project
from tests._fixtures.project_builder import ProjectBuilder


class StaticCheck(Check):
    """Emits a fixed list of (severity, message) findings."""

    def __init__(self, check_id: str, *severities: str) -> None:
        self.id = check_id
        self.name = f"Static {check_id}"
        self._severities = severities

    def run(self, project: Project) -> List[Finding]:
        return [self.finding(severity, f"{self.id} #{n}") for n, severity in enumerate(self._severities)]


class ExplodingCheck(Check):
    id = "COD-007"
    name = "Exploding"

    def run(self, project: Project) -> List[Finding]:
        raise RuntimeError("boom")


class RecordingDeferredCheck(Check):
    id = "AI-009"
    name = "Recorder"
    deferred = True

    def __init__(self) -> None:
        self.seen: List[str] = []
        self.total_checks = -1

    def run(self, project: Project) -> List[Finding]:  # pragma: no cover - executor calls run_after
        return self.run_after(project, ())

    def run_after(
        self, project: Project, findings: Sequence[Finding], *, total_checks: int = 0
    ) -> List[Finding]:
        self.seen = [finding.id for finding in findings]
        self.total_checks = total_checks
        return [self.finding("INFO", "analysed")]


def test_findings_are_sorted_by_severity_then_id(project_builder: ProjectBuilder) -> None:
    project = project_builder.build()
    checks = [
        StaticCheck("POL-001", "WARNING"),
        StaticCheck("DOC-004", "INFO"),
        StaticCheck("SEC-001", "HIGH", "HIGH"),
        StaticCheck("AND-003", "WARNING"),
        StaticCheck("AND-005", "HIGH"),
    ]

    result = run_checks(project, checks)

    assert [(f.id, f.severity) for f in result.findings] == [
        ("AND-005", "HIGH"),
        ("SEC-001", "HIGH"),
        ("SEC-001", "HIGH"),
        ("AND-003", "WARNING"),
        ("POL-001", "WARNING"),
        ("DOC-004", "INFO"),
    ]
    # equal keys keep their emission order
    assert [f.message for f in result.findings[1:3]] == ["SEC-001 #0", "SEC-001 #1"]
    assert result.checks_run == 5
    assert result.summary.to_dict() == {"high": 3, "warning": 2, "info": 1, "passed": 0}


def test_passed_counts_checks_without_findings(project_builder: ProjectBuilder) -> None:
    project = project_builder.build()
    checks = [StaticCheck("AND-001"), StaticCheck("AND-002"), StaticCheck("AND-003", "WARNING")]

    result = run_checks(project, checks)

    assert result.summary.passed == 2


def test_failing_check_becomes_info_finding(project_builder: ProjectBuilder) -> None:
    project = project_builder.build()

    result = run_checks(project, [ExplodingCheck(), StaticCheck("AND-005", "HIGH")])

    assert [f.id for f in result.findings] == ["AND-005", "COD-007"]
    failure = result.findings[1]
    assert failure.severity == "INFO"
    assert failure.title == "Exploding Failed"
    assert "RuntimeError: boom" in failure.message


def test_deferred_checks_run_last_with_static_findings(project_builder: ProjectBuilder) -> None:
    project = project_builder.build()
    recorder = RecordingDeferredCheck()

    result = run_checks(project, [recorder, StaticCheck("AND-005", "HIGH"), StaticCheck("DOC-004", "INFO")])

    assert recorder.seen == ["AND-005", "DOC-004"]
    assert recorder.total_checks == 3
    assert [f.id for f in result.findings] == ["AND-005", "AI-009", "DOC-004"]


def test_missing_project_root_yields_empty_result(tmp_path: Path) -> None:
    project = build_project(tmp_path / "missing")

    result = run_checks(project, [StaticCheck("AND-005", "HIGH")])

    assert result.findings == []
    assert result.checks_run == 0
    assert result.summary.to_dict() == {"high": 0, "warning": 0, "info": 0, "passed": 0}


def test_sort_findings_places_unknown_severities_last() -> None:
    findings = [Finding("X-1", "BOGUS", "t", "m"), Finding("X-2", "INFO", "t", "m")]

    assert [f.id for f in sort_findings(findings)] == ["X-2", "X-1"]
