"""Compare two JSON reports (``fsct diff``)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .formatters.base import Clock, utc_now
from .formatters.structured import load_report
from .models import Finding


@dataclass
class ChangedFinding:
    before: Finding
    after: Finding

    def to_dict(self) -> Dict[str, Any]:
        return {"before": self.before.to_dict(), "after": self.after.to_dict()}


@dataclass
class DiffResult:
    """Findings added, removed, or re-rated between two runs."""

    added: List[Finding] = field(default_factory=list)
    removed: List[Finding] = field(default_factory=list)
    changed: List[ChangedFinding] = field(default_factory=list)
    unchanged: int = 0

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed or self.changed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "added": [finding.to_dict() for finding in self.added],
            "removed": [finding.to_dict() for finding in self.removed],
            "changed": [item.to_dict() for item in self.changed],
            "summary": {
                "added": len(self.added),
                "removed": len(self.removed),
                "changed": len(self.changed),
                "same": self.unchanged,
            },
        }

    def format(self, style: str = "console", *, clock: Clock | None = None) -> str:
        if style == "json":
            return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"
        if style != "console":
            raise ValueError(f"Unknown diff format '{style}' (expected console or json)")
        return self._format_console((clock or utc_now)().isoformat())

    def _format_console(self, generated: str) -> str:
        lines = [
            "FSCT Diff Report",
            "================",
            f"Generated: {generated}",
            "",
            "Summary:",
            f"  Added:    +{len(self.added)}",
            f"  Removed:  -{len(self.removed)}",
            f"  Changed:  ~{len(self.changed)}",
        ]
        if self.added:
            lines.extend(["", f"Added Findings (+{len(self.added)}):"])
            lines.extend(f"  [+] {f.id} ({f.severity}): {f.title}" for f in self.added)
        if self.removed:
            lines.extend(["", f"Removed Findings (-{len(self.removed)}):"])
            lines.extend(f"  [-] {f.id} ({f.severity}): {f.title}" for f in self.removed)
        if self.changed:
            lines.extend(["", f"Changed Findings (~{len(self.changed)}):"])
            lines.extend(
                f"  [~] {c.before.id}: {c.before.severity} -> {c.after.severity}"
                for c in self.changed
            )
        return "\n".join(lines) + "\n"


def finding_key(finding: Finding) -> str:
    return f"{finding.id}|{finding.file}|{finding.message}"


def compare(old: Sequence[Finding], new: Sequence[Finding]) -> DiffResult:
    """Match findings by id, file and message; severity changes are reported separately."""
    old_map = {finding_key(finding): finding for finding in old}
    new_map = {finding_key(finding): finding for finding in new}

    result = DiffResult()
    for key, after in new_map.items():
        before = old_map.get(key)
        if before is None:
            result.added.append(after)
        elif before.severity != after.severity:
            result.changed.append(ChangedFinding(before=before, after=after))
        else:
            result.unchanged += 1
    result.removed = [finding for key, finding in old_map.items() if key not in new_map]

    result.added.sort(key=lambda finding: finding.id)
    result.removed.sort(key=lambda finding: finding.id)
    result.changed.sort(key=lambda item: item.before.id)
    return result


def load_findings(path: Path) -> List[Finding]:
    """Read the findings of a JSON report; raises ``ValueError`` for non-JSON input."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        return load_report(text).findings
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not a valid JSON report: {exc}") from exc


def diff_reports(old_path: Path, new_path: Path) -> DiffResult:
    return compare(load_findings(old_path), load_findings(new_path))


__all__ = ["ChangedFinding", "DiffResult", "compare", "diff_reports", "finding_key", "load_findings"]
