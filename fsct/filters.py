"""Post-run finding filters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Set

from .models import SEVERITY_INFO, Finding, parse_severity, severity_rank


@dataclass
class FindingFilter:
    """Severity threshold, id allow/skip sets and file-path ignore substrings.

    Ids match either exactly or through the check id that produced a sub-id,
    so allowing ``AI-001`` keeps ``AI-001-003``.
    """

    min_severity: str = SEVERITY_INFO
    allowed: Set[str] = field(default_factory=set)
    skipped: Set[str] = field(default_factory=set)
    ignore_patterns: List[str] = field(default_factory=list)

    @classmethod
    def from_options(
        cls,
        *,
        severity: str = "info",
        allowed: Iterable[str] = (),
        skipped: Iterable[str] = (),
        ignore: Iterable[str] = (),
    ) -> "FindingFilter":
        return cls(
            min_severity=parse_severity(severity),
            allowed=set(allowed),
            skipped=set(skipped),
            ignore_patterns=[pattern for pattern in ignore if pattern],
        )

    def should_ignore(self, file: str) -> bool:
        return bool(file) and any(pattern in file for pattern in self.ignore_patterns)

    def should_include(self, finding: Finding) -> bool:
        if severity_rank(finding.severity) < severity_rank(self.min_severity):
            return False
        ids = _candidate_ids(finding.id)
        if self.allowed and not ids & self.allowed:
            return False
        if ids & self.skipped:
            return False
        return not self.should_ignore(finding.file)

    def apply(self, findings: Iterable[Finding]) -> List[Finding]:
        """Return the kept findings in their original order."""
        return [finding for finding in findings if self.should_include(finding)]


def filter_by_severity(findings: Iterable[Finding], min_severity: str) -> List[Finding]:
    threshold = severity_rank(parse_severity(min_severity))
    return [finding for finding in findings if severity_rank(finding.severity) >= threshold]


def _candidate_ids(finding_id: str) -> Set[str]:
    parts = finding_id.split("-")
    ids = {finding_id}
    if len(parts) > 2:
        ids.add("-".join(parts[:2]))
    return ids


__all__ = ["FindingFilter", "filter_by_severity"]
