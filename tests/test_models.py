from __future__ import annotations

import pytest

from fsct.models import (
    Finding,
    Report,
    Summary,
    category_for_id,
    parse_severity,
    severity_rank,
)


def test_severity_rank_orders_high_above_warning_above_info() -> None:
    assert severity_rank("HIGH") > severity_rank("WARNING") > severity_rank("INFO")
    with pytest.raises(ValueError):
        severity_rank("CRITICAL")


@pytest.mark.parametrize("raw, expected", [("high", "HIGH"), (" Warning ", "WARNING"), ("INFO", "INFO")])
def test_parse_severity_normalises_input(raw: str, expected: str) -> None:
    assert parse_severity(raw) == expected


def test_parse_severity_rejects_unknown_values() -> None:
    with pytest.raises(ValueError, match="expected one of: high, warning, info"):
        parse_severity("fatal")


def test_finding_to_dict_omits_empty_optional_fields() -> None:
    bare = Finding(id="POL-001", severity="WARNING", title="Privacy Policy", message="Missing")
    full = Finding(
        id="SEC-001",
        severity="HIGH",
        title="Hardcoded Secrets",
        message="API key found",
        file="lib/api.dart",
        line=12,
        suggestion="Use --dart-define",
    )

    assert bare.to_dict() == {
        "id": "POL-001",
        "severity": "WARNING",
        "title": "Privacy Policy",
        "message": "Missing",
    }
    assert full.to_dict()["line"] == 12
    assert Finding.from_dict(full.to_dict()) == full


def test_finding_from_dict_tolerates_bad_line_values() -> None:
    finding = Finding.from_dict({"id": "COD-001", "line": "n/a", "file": None})

    assert finding.line == 0
    assert finding.file == ""
    assert finding.severity == "INFO"


def test_summary_counts_severities_and_passed_checks() -> None:
    findings = [
        Finding("AND-005", "HIGH", "Debuggable", "m"),
        Finding("AND-003", "WARNING", "Backup", "m"),
        Finding("DOC-004", "INFO", "Changelog", "m"),
        Finding("DOC-003", "INFO", "License", "m"),
    ]

    summary = Summary.from_findings(findings, checks_run=10)

    assert summary.to_dict() == {"high": 1, "warning": 1, "info": 2, "passed": 6}
    assert Summary.from_findings(findings, checks_run=2).passed == 0


def test_report_round_trips_through_dict() -> None:
    finding = Finding("IOS-001", "HIGH", "Bundle Identifier", "Missing", file="ios/Runner/Info.plist")
    report = Report(
        timestamp="2026-01-02T03:04:05+00:00",
        summary=Summary(high=1),
        findings=[finding],
        project="acme_app",
    )

    data = report.to_dict()

    assert list(data) == ["version", "timestamp", "project", "summary", "findings"]
    assert Report.from_dict(data) == report


def test_report_without_summary_derives_one_from_findings() -> None:
    report = Report.from_dict({"findings": [{"id": "AND-005", "severity": "HIGH"}, "junk"]})

    assert report.summary.high == 1
    assert report.version == "1.0.0"


@pytest.mark.parametrize(
    "check_id, category",
    [("AND-001", "Android"), ("LINT-003", "Linting"), ("AI-002-001", "AI Analysis"), ("XYZ-1", "Other")],
)
def test_category_for_id(check_id: str, category: str) -> None:
    assert category_for_id(check_id) == category
