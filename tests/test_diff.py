"""Tests for fsct.diff."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from fsct.diff import compare, diff_reports, load_findings
from fsct.formatters import JSONFormatter
from fsct.models import Finding, Summary

CLOCK = lambda: datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)  # noqa: E731

DEBUGGABLE = Finding("AND-005", "HIGH", "Debuggable", "debuggable=true", file="android/app/src/main/AndroidManifest.xml")
BACKUP = Finding("AND-003", "WARNING", "Allow Backup", "allowBackup enabled")
CHANGELOG = Finding("DOC-004", "INFO", "Changelog", "No CHANGELOG.md")


def _write(path: Path, findings) -> Path:
    content = JSONFormatter(clock=CLOCK).format(findings, Summary.from_findings(findings, 10))
    path.write_text(content, encoding="utf-8")
    return path


def test_compare_classifies_added_removed_changed_and_unchanged() -> None:
    regraded = Finding("AND-003", "HIGH", "Allow Backup", "allowBackup enabled")
    new_issue = Finding("SEC-003", "WARNING", "Insecure HTTP", "http://api.acme.io")

    result = compare([DEBUGGABLE, BACKUP, CHANGELOG], [new_issue, regraded, CHANGELOG])

    assert [f.id for f in result.added] == ["SEC-003"]
    assert [f.id for f in result.removed] == ["AND-005"]
    assert [(c.before.severity, c.after.severity) for c in result.changed] == [("WARNING", "HIGH")]
    assert result.unchanged == 1
    assert result.has_changes


def test_identical_reports_have_no_changes() -> None:
    result = compare([DEBUGGABLE, CHANGELOG], [CHANGELOG, DEBUGGABLE])

    assert not result.has_changes
    assert result.to_dict()["summary"] == {"added": 0, "removed": 0, "changed": 0, "same": 2}


def test_console_format_lists_each_change() -> None:
    result = compare([DEBUGGABLE], [CHANGELOG])

    text = result.format("console", clock=CLOCK)

    assert text.startswith("FSCT Diff Report\n================\nGenerated: 2026-03-01T12:00:00+00:00\n")
    assert "  Added:    +1" in text
    assert "  [+] DOC-004 (INFO): Changelog" in text
    assert "  [-] AND-005 (HIGH): Debuggable" in text
    assert "Changed Findings" not in text


def test_json_format_and_unknown_style() -> None:
    result = compare([], [DEBUGGABLE])

    data = json.loads(result.format("json"))

    assert data["added"][0]["id"] == "AND-005"
    assert data["summary"]["added"] == 1
    with pytest.raises(ValueError, match="Unknown diff format"):
        result.format("html")


def test_diff_reports_reads_json_reports(tmp_path: Path) -> None:
    old = _write(tmp_path / "old.json", [DEBUGGABLE, BACKUP])
    new = _write(tmp_path / "new.json", [BACKUP])

    result = diff_reports(old, new)

    assert [f.id for f in result.removed] == ["AND-005"]
    assert result.removed[0].file == DEBUGGABLE.file
    assert result.unchanged == 1


def test_load_findings_rejects_non_json(tmp_path: Path) -> None:
    report = tmp_path / "report.yaml"
    report.write_text("findings: []\n", encoding="utf-8")

    with pytest.raises(ValueError, match="not a valid JSON report"):
        load_findings(report)
