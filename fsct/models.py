"""Core data models shared across fsct components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

SEVERITY_INFO = "INFO"
SEVERITY_WARNING = "WARNING"
SEVERITY_HIGH = "HIGH"

SEVERITIES = (SEVERITY_HIGH, SEVERITY_WARNING, SEVERITY_INFO)

_SEVERITY_RANK: Dict[str, int] = {
    SEVERITY_INFO: 0,
    SEVERITY_WARNING: 1,
    SEVERITY_HIGH: 2,
}

REPORT_VERSION = "1.0.0"


def severity_rank(severity: str) -> int:
    """Return the ordinal of a severity (HIGH > WARNING > INFO)."""
    try:
        return _SEVERITY_RANK[severity]
    except KeyError as exc:
        raise ValueError(f"Unknown severity: {severity!r}") from exc


def parse_severity(value: str) -> str:
    """Normalise user input such as ``warning`` into a severity constant."""
    normalized = value.strip().upper()
    if normalized not in _SEVERITY_RANK:
        choices = ", ".join(s.lower() for s in SEVERITIES)
        raise ValueError(f"Invalid severity '{value}' (expected one of: {choices})")
    return normalized


@dataclass(frozen=True)
class Finding:
    """One compliance observation emitted by a check."""

    id: str
    severity: str
    title: str
    message: str
    file: str = ""
    line: int = 0
    suggestion: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "severity": self.severity,
            "title": self.title,
            "message": self.message,
        }
        if self.file:
            data["file"] = self.file
        if self.line:
            data["line"] = self.line
        if self.suggestion:
            data["suggestion"] = self.suggestion
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Finding":
        line = data.get("line") or 0
        return cls(
            id=str(data.get("id", "")),
            severity=str(data.get("severity", SEVERITY_INFO)),
            title=str(data.get("title", "")),
            message=str(data.get("message", "")),
            file=str(data.get("file") or ""),
            line=int(line) if isinstance(line, (int, str)) and str(line).isdigit() else 0,
            suggestion=str(data.get("suggestion") or ""),
        )


@dataclass
class Summary:
    """Per-run totals by severity plus the passed-check count."""

    high: int = 0
    warning: int = 0
    info: int = 0
    passed: int = 0

    @classmethod
    def from_findings(cls, findings: Iterable[Finding], checks_run: int) -> "Summary":
        summary = cls()
        total = 0
        for finding in findings:
            total += 1
            if finding.severity == SEVERITY_HIGH:
                summary.high += 1
            elif finding.severity == SEVERITY_WARNING:
                summary.warning += 1
            else:
                summary.info += 1
        summary.passed = max(checks_run - total, 0)
        return summary

    def to_dict(self) -> Dict[str, int]:
        return {
            "high": self.high,
            "warning": self.warning,
            "info": self.info,
            "passed": self.passed,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Summary":
        return cls(
            high=int(data.get("high", 0) or 0),
            warning=int(data.get("warning", 0) or 0),
            info=int(data.get("info", 0) or 0),
            passed=int(data.get("passed", 0) or 0),
        )


@dataclass
class Report:
    """Serialisable envelope written by the JSON and YAML formatters."""

    timestamp: str
    summary: Summary
    findings: List[Finding] = field(default_factory=list)
    project: str = ""
    version: str = REPORT_VERSION

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "version": self.version,
            "timestamp": self.timestamp,
        }
        if self.project:
            data["project"] = self.project
        data["summary"] = self.summary.to_dict()
        data["findings"] = [finding.to_dict() for finding in self.findings]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Report":
        raw_findings = data.get("findings") or []
        findings = [Finding.from_dict(item) for item in raw_findings if isinstance(item, Mapping)]
        summary_data = data.get("summary")
        summary = (
            Summary.from_dict(summary_data)
            if isinstance(summary_data, Mapping)
            else Summary.from_findings(findings, 0)
        )
        return cls(
            timestamp=str(data.get("timestamp", "")),
            summary=summary,
            findings=findings,
            project=str(data.get("project") or ""),
            version=str(data.get("version") or REPORT_VERSION),
        )


def category_for_id(check_id: str) -> str:
    """Map a check identifier to its display category."""
    prefix = check_id.split("-", 1)[0]
    return CATEGORY_BY_PREFIX.get(prefix, "Other")


CATEGORY_BY_PREFIX: Dict[str, str] = {
    "AND": "Android",
    "IOS": "iOS",
    "FLT": "Flutter",
    "SEC": "Security",
    "POL": "Policy",
    "COD": "Code Quality",
    "TST": "Testing",
    "LINT": "Linting",
    "DOC": "Documentation",
    "PERF": "Performance",
    "REV": "Reviewer",
    "AI": "AI Analysis",
}


__all__ = [
    "CATEGORY_BY_PREFIX",
    "Finding",
    "REPORT_VERSION",
    "Report",
    "SEVERITIES",
    "SEVERITY_HIGH",
    "SEVERITY_INFO",
    "SEVERITY_WARNING",
    "Summary",
    "category_for_id",
    "parse_severity",
    "severity_rank",
]
