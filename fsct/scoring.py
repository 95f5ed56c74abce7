"""Weighted compliance score and letter grade."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set, Tuple

from .models import Finding

# (category, id prefixes, expected checks, weight)
CATEGORY_WEIGHTS: Tuple[Tuple[str, Tuple[str, ...], int, float], ...] = (
    ("Android", ("AND",), 12, 0.25),
    ("iOS", ("IOS",), 12, 0.25),
    ("Flutter", ("FLT",), 8, 0.15),
    ("Security", ("SEC",), 5, 0.20),
    ("Policy", ("POL",), 5, 0.10),
    ("Code Quality", ("COD", "TST", "LINT", "DOC", "PERF"), 33, 0.05),
)

GRADE_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (0.95, "A+"),
    (0.90, "A"),
    (0.85, "A-"),
    (0.80, "B+"),
    (0.75, "B"),
    (0.70, "B-"),
    (0.65, "C+"),
    (0.60, "C"),
    (0.55, "C-"),
    (0.50, "D+"),
    (0.45, "D"),
)

_SUMMARIES: Dict[str, str] = {
    "A": "Excellent! Your app meets high compliance standards. Ready for app store submission.",
    "B": "Good compliance. A few issues should be addressed before submission.",
    "C": "Moderate compliance. Several issues need attention before submission.",
    "D": "Low compliance. Significant issues must be resolved before submission.",
    "F": "Critical compliance issues. Major changes required before submission.",
}


@dataclass
class CategoryScore:
    category: str
    expected: int
    failed: int
    score: float
    weight: float

    @property
    def weighted(self) -> float:
        return self.score * self.weight

    @property
    def passed(self) -> int:
        return max(self.expected - self.failed, 0)


@dataclass
class ComplianceScore:
    overall: float
    grade: str
    summary: str
    categories: List[CategoryScore] = field(default_factory=list)

    @property
    def percent(self) -> int:
        return int(round(self.overall * 100))

    def category(self, name: str) -> CategoryScore:
        for item in self.categories:
            if item.category == name:
                return item
        raise KeyError(name)


def calculate_score(findings: Iterable[Finding]) -> ComplianceScore:
    """Score each weighted category by the share of its checks that raised nothing.

    A check counts as failed once, however many findings it emitted.
    """
    failed_by_prefix: Dict[str, Set[str]] = {}
    for finding in findings:
        parts = finding.id.split("-")
        base_id = "-".join(parts[:2])
        failed_by_prefix.setdefault(parts[0], set()).add(base_id)

    categories: List[CategoryScore] = []
    for name, prefixes, expected, weight in CATEGORY_WEIGHTS:
        failed = sum(len(failed_by_prefix.get(prefix, ())) for prefix in prefixes)
        score = min(max((expected - failed) / expected, 0.0), 1.0)
        categories.append(
            CategoryScore(
                category=name,
                expected=expected,
                failed=failed,
                score=round(score, 2),
                weight=weight,
            )
        )

    overall = sum(
        min(max((item.expected - item.failed) / item.expected, 0.0), 1.0) * item.weight
        for item in categories
    )
    grade = grade_for(overall)
    return ComplianceScore(
        overall=round(overall, 2),
        grade=grade,
        summary=summary_for(grade),
        categories=categories,
    )


def grade_for(score: float) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"


def summary_for(grade: str) -> str:
    return _SUMMARIES.get(grade[:1], _SUMMARIES["F"])


__all__ = [
    "CATEGORY_WEIGHTS",
    "CategoryScore",
    "ComplianceScore",
    "GRADE_THRESHOLDS",
    "calculate_score",
    "grade_for",
    "summary_for",
]
