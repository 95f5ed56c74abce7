"""Tests for the report formatters."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml

from fsct.formatters import (
    ConsoleFormatter,
    GitHubSummaryFormatter,
    HTMLFormatter,
    JSONFormatter,
    PromptFormatter,
    SARIFFormatter,
    YAMLFormatter,
    get_formatter,
    load_report,
    report_path,
    write_report,
)
from fsct.formatters.base import Formatter
from fsct.models import Finding, Summary


def fixed_clock() -> datetime:
    return datetime(2026, 1, 15, 9, 5, tzinfo=timezone.utc)


FINDINGS = [
    Finding(
        "SEC-001",
        "HIGH",
        "Hardcoded Secrets",
        "Potential API key found",
        file="lib/api.dart",
        line=12,
        suggestion="Move secrets to --dart-define",
    ),
    Finding("AND-012", "WARNING", "Allow Backup Check", "allowBackup is true", file="android/app/src/main/AndroidManifest.xml"),
    Finding("DOC-004", "INFO", "Changelog", "No CHANGELOG.md"),
]
SUMMARY = Summary(high=1, warning=1, info=1, passed=7)


def test_console_lists_findings_with_location_and_suggestion() -> None:
    text = ConsoleFormatter(clock=fixed_clock).format(FINDINGS, SUMMARY)

    assert text.startswith("FSCT Report\n")
    assert "Summary  High 1  |  Warning 1  |  Info 1  |  Passed 7" in text
    assert "× SEC-001  (HIGH)" in text
    assert "! AND-012  (WARNING)" in text
    assert "• DOC-004  (INFO)" in text
    assert "  lib/api.dart:12" in text
    assert "  android/app/src/main/AndroidManifest.xml\n" in text
    assert "  Suggestion: Move secrets to --dart-define" in text


def test_console_reports_clean_run() -> None:
    text = ConsoleFormatter().format([], Summary(passed=75))

    assert text.rstrip().endswith("No issues found. All checks passed.")


def test_json_report_envelope() -> None:
    text = JSONFormatter(clock=fixed_clock).format(FINDINGS, SUMMARY)

    data = json.loads(text)
    assert data["version"] == "1.0.0"
    assert data["timestamp"] == "2026-01-15T09:05:00+00:00"
    assert data["summary"] == {"high": 1, "warning": 1, "info": 1, "passed": 7}
    assert data["findings"][0] == {
        "id": "SEC-001",
        "severity": "HIGH",
        "title": "Hardcoded Secrets",
        "message": "Potential API key found",
        "file": "lib/api.dart",
        "line": 12,
        "suggestion": "Move secrets to --dart-define",
    }
    assert load_report(text).findings == FINDINGS


def test_json_report_reformats_byte_for_byte() -> None:
    formatter = JSONFormatter(clock=fixed_clock)
    text = formatter.format(FINDINGS, SUMMARY)

    report = load_report(text)

    assert formatter.format(report.findings, report.summary) == text


def test_yaml_matches_json_document() -> None:
    json_data = json.loads(JSONFormatter(clock=fixed_clock).format(FINDINGS, SUMMARY))

    yaml_text = YAMLFormatter(clock=fixed_clock).format(FINDINGS, SUMMARY)

    assert yaml_text.startswith("version: 1.0.0\n")
    assert yaml.safe_load(yaml_text) == json_data


def test_sarif_results_map_severity_and_location() -> None:
    document = json.loads(SARIFFormatter().format(FINDINGS, SUMMARY))

    assert document["version"] == "2.1.0"
    assert isinstance(document["runs"], list)
    run = document["runs"][0]
    assert run["tool"]["driver"]["name"] == "FSCT"
    results = run["results"]
    assert [result["level"] for result in results] == ["error", "warning", "note"]
    assert results[0]["locations"][0]["physicalLocation"] == {
        "artifactLocation": {"uri": "lib/api.dart"},
        "region": {"startLine": 12},
    }
    assert "region" not in results[1]["locations"][0]["physicalLocation"]
    assert "locations" not in results[2]


@pytest.mark.parametrize(
    "summary, heading, detail",
    [
        (Summary(high=2, warning=1), "## Compliance Issues Found", "2 high severity issues"),
        (Summary(warning=3, info=1), "## Compliance Report", "3 warning issues should be reviewed."),
        (Summary(info=2, passed=73), "## Compliance Passed", "**Passed:** 73"),
    ],
)
def test_github_summary_variants(summary: Summary, heading: str, detail: str) -> None:
    payload = json.loads(GitHubSummaryFormatter().format([], summary))

    assert payload["title"] == "FSCT Compliance Report"
    assert payload["summary"].startswith(heading)
    assert detail in payload["summary"]


def test_html_report_escapes_and_shows_grade() -> None:
    findings = [Finding("COD-006", "WARNING", "TODO Comments", "<script>alert(1)</script>")]

    html = HTMLFormatter(clock=fixed_clock).format(findings, Summary(warning=1, passed=74))

    assert html.startswith("<!DOCTYPE html>")
    assert "Generated at January 15, 2026 09:05" in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "<script>alert" not in html
    assert 'class="finding warning"' in html
    assert '<div class="grade">A+<small>100% compliance</small></div>' in html


def test_html_report_without_findings() -> None:
    html = HTMLFormatter(clock=fixed_clock).format([], Summary(passed=75))

    assert "No issues found! All checks passed." in html


def test_prompt_formatter_wraps_prompt_with_header() -> None:
    text = PromptFormatter().format(FINDINGS, SUMMARY)

    assert "AI COMPLIANCE PROMPT - COPY & PASTE INTO YOUR AI ASSISTANT" in text
    assert "START OF PROMPT" in text and "END OF PROMPT" in text
    assert "• App Name: Flutter App" in text
    assert "[SEC-001] Hardcoded Secrets" in text
    assert "• Template: comprehensive" in text


def test_prompt_formatter_summary_template_without_header() -> None:
    formatter = PromptFormatter(template_type="summary", with_header=False)

    text = formatter.format(FINDINGS, SUMMARY)

    assert text.startswith("Analyze this Flutter app's compliance data")
    # 7 of 10 checks passed: 70 - 10 - 3 - 1
    assert "SCORE: 56/100" in text
    assert "STATUS: ❌ NEEDS CRITICAL ATTENTION" in text
    assert "- Passed: 7/10" in text


def test_get_formatter_resolves_names_and_drops_prompt_only_options() -> None:
    formatter = get_formatter("JSON", project=object(), clock=fixed_clock)

    assert isinstance(formatter, JSONFormatter)
    assert formatter.timestamp() == "2026-01-15T09:05:00+00:00"
    assert isinstance(get_formatter("prompt", project=None, reviewer=None), PromptFormatter)
    with pytest.raises(ValueError, match="Unknown format 'pdf'"):
        get_formatter("pdf")


def test_write_report_appends_extension(tmp_path: Path) -> None:
    path = write_report("{}\n", str(tmp_path / "out" / "scan"), "json")

    assert path == tmp_path / "out" / "scan.json"
    assert path.read_text(encoding="utf-8") == "{}\n"
    assert report_path(None, "sarif") == Path("fsct-report.sarif")
    assert report_path("report", "") == Path("report")


def test_formatter_requires_format() -> None:
    class Incomplete(Formatter):
        name = "incomplete"

    with pytest.raises(TypeError):
        Formatter()
    with pytest.raises(TypeError):
        Incomplete(clock=fixed_clock)
