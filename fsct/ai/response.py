"""Turn free-form model output into :class:`AIAnalysis` records and findings."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..models import SEVERITY_HIGH, SEVERITY_INFO, SEVERITY_WARNING, Finding
from .errors import InvalidResponseError

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_NUMBERED_LINE = re.compile(r"(?i)^\s*(\d+)[:.\)]\s*(.+)$")

_CATEGORY_KEYWORDS = (
    ("permissions", ("permission",)),
    ("policy", ("privacy", "policy")),
    ("security", ("security",)),
    ("store", ("store",)),
    ("reviewer", ("reviewer",)),
)
_HIGH_MARKERS = ("critical", "blocker", "❌", "must fix")
_WARNING_MARKERS = ("warning", "should", "⚠️")
_ACTION_WORDS = ("fix", "add", "update", "remove")

EXPECTED_JSON_SCHEMA = """{
  "risk_level": "low|medium|high",
  "confidence": "low|medium|high",
  "compliance_score": 0-100,
  "store_readiness": {
    "app_store": true|false,
    "play_store": true|false,
    "reasoning": "explanation"
  },
  "insights": [
    {
      "category": "permissions|policy|security|store|reviewer|general",
      "severity": "info|warning|high",
      "title": "brief title",
      "description": "detailed description",
      "confidence": "low|medium|high"
    }
  ],
  "suggestions": [
    {
      "priority": 1-5,
      "category": "category",
      "issue": "what needs fixing",
      "action": "how to fix it",
      "code_example": "optional code snippet",
      "file_path": "optional generic path"
    }
  ],
  "reviewer_notes": [
    "note for app reviewers"
  ]
}"""


@dataclass
class StoreReadiness:
    app_store: bool = False
    play_store: bool = False
    reasoning: str = ""


@dataclass
class AIInsight:
    category: str = ""
    severity: str = ""
    title: str = ""
    description: str = ""
    confidence: str = ""


@dataclass
class AISuggestion:
    priority: int = 0
    category: str = ""
    issue: str = ""
    action: str = ""
    code_example: str = ""
    file_path: str = ""


@dataclass
class AIAnalysis:
    risk_level: str = ""
    confidence: str = ""
    compliance_score: int = 0
    store_readiness: StoreReadiness = field(default_factory=StoreReadiness)
    insights: List[AIInsight] = field(default_factory=list)
    suggestions: List[AISuggestion] = field(default_factory=list)
    reviewer_notes: List[str] = field(default_factory=list)
    raw_content: str = field(default="", repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AIAnalysis":
        """Build an analysis from decoded JSON; raises ``TypeError``/``ValueError`` on bad shapes."""
        if not isinstance(data, Mapping):
            raise TypeError("analysis must be a JSON object")
        readiness = data.get("store_readiness") or {}
        if not isinstance(readiness, Mapping):
            raise TypeError("store_readiness must be an object")
        return cls(
            risk_level=_text(data.get("risk_level")),
            confidence=_text(data.get("confidence")),
            compliance_score=int(data.get("compliance_score") or 0),
            store_readiness=StoreReadiness(
                app_store=bool(readiness.get("app_store", False)),
                play_store=bool(readiness.get("play_store", False)),
                reasoning=_text(readiness.get("reasoning")),
            ),
            insights=[
                AIInsight(
                    category=_text(item.get("category")),
                    severity=_text(item.get("severity")),
                    title=_text(item.get("title")),
                    description=_text(item.get("description")),
                    confidence=_text(item.get("confidence")),
                )
                for item in _objects(data.get("insights"), "insights")
            ],
            suggestions=[
                AISuggestion(
                    priority=int(item.get("priority") or 0),
                    category=_text(item.get("category")),
                    issue=_text(item.get("issue")),
                    action=_text(item.get("action")),
                    code_example=_text(item.get("code_example")),
                    file_path=_text(item.get("file_path")),
                )
                for item in _objects(data.get("suggestions"), "suggestions")
            ],
            reviewer_notes=[_text(note) for note in _list(data.get("reviewer_notes"), "reviewer_notes")],
        )

    def to_findings(self, prefix: str) -> List[Finding]:
        """One finding per insight, numbered ``<prefix>-001`` onwards."""
        findings: List[Finding] = []
        for index, insight in enumerate(self.insights, start=1):
            findings.append(
                Finding(
                    id=f"{prefix}-{index:03d}",
                    severity=_finding_severity(insight.severity),
                    title=insight.title,
                    message=insight.description,
                    suggestion=self._suggestion_for(insight),
                )
            )
        return findings

    def _suggestion_for(self, insight: AIInsight) -> str:
        title = insight.title.lower()
        description = insight.description.lower()
        for suggestion in self.suggestions:
            issue = suggestion.issue.lower()
            if title in issue or issue in description:
                return suggestion.action
        return ""

    def is_ready(self) -> bool:
        return (
            self.store_readiness.app_store
            and self.store_readiness.play_store
            and self.risk_level != "high"
        )

    def priority_insights(self, limit: int = 0) -> List[AIInsight]:
        """Insights ordered high, warning, then everything else; ``limit`` <= 0 keeps all."""
        order = {"high": 0, "warning": 1}
        ranked = sorted(self.insights, key=lambda insight: order.get(insight.severity, 2))
        if limit > 0:
            return ranked[:limit]
        return ranked


def parse_response(content: str) -> AIAnalysis:
    """Parse model output, falling back to plain-text heuristics when JSON is unusable."""
    candidate = extract_json(content)
    if candidate:
        try:
            analysis = AIAnalysis.from_dict(json.loads(candidate))
        except (TypeError, ValueError):
            pass
        else:
            analysis.raw_content = content
            return analysis
    return parse_plain_text(content)


def parse_response_strict(content: str) -> AIAnalysis:
    candidate = extract_json(content)
    if not candidate:
        raise InvalidResponseError("invalid AI response: no JSON found in response")
    try:
        analysis = AIAnalysis.from_dict(json.loads(candidate))
    except (TypeError, ValueError) as exc:
        raise InvalidResponseError(f"invalid AI response: {exc}") from exc
    analysis.raw_content = content
    return analysis


def extract_json(content: str) -> str:
    """Return a fenced code block, else the outermost ``{...}`` span, else ``""``."""
    match = _FENCED_BLOCK.search(content)
    if match:
        return match.group(1).strip()
    start = content.find("{")
    end = content.rfind("}")
    if start != -1 and end > start:
        return content[start : end + 1]
    return ""


def parse_plain_text(content: str) -> AIAnalysis:
    analysis = AIAnalysis(raw_content=content)
    lowered = content.lower()
    if "high risk" in lowered or "critical" in lowered:
        analysis.risk_level = "high"
    elif "medium risk" in lowered or "moderate" in lowered:
        analysis.risk_level = "medium"
    else:
        analysis.risk_level = "low"

    if "ready for app store" in lowered or "app store: yes" in lowered:
        analysis.store_readiness.app_store = True
    if "ready for play store" in lowered or "play store: yes" in lowered:
        analysis.store_readiness.play_store = True

    analysis.insights = _insights_from_text(content)
    analysis.suggestions = _suggestions_from_text(content)
    analysis.reviewer_notes = _reviewer_notes_from_text(content)
    return analysis


def _insights_from_text(content: str) -> List[AIInsight]:
    insights: List[AIInsight] = []
    category = "general"
    for raw in content.split("\n"):
        line = raw.strip()
        if line.startswith("##") or line.startswith("**"):
            lowered = line.lower()
            for name, keywords in _CATEGORY_KEYWORDS:
                if any(keyword in lowered for keyword in keywords):
                    category = name
                    break
            continue
        if not line.startswith(("-", "*", "•")):
            continue
        line = line.lstrip("-*• ")
        lowered = line.lower()
        if any(marker in lowered for marker in _HIGH_MARKERS):
            severity = "high"
        elif any(marker in lowered for marker in _WARNING_MARKERS):
            severity = "warning"
        else:
            severity = "info"
        if len(line) > 10:
            insights.append(
                AIInsight(
                    category=category,
                    severity=severity,
                    title=_truncate(line, 100),
                    description=line,
                )
            )
    return insights


def _suggestions_from_text(content: str) -> List[AISuggestion]:
    lines = [line.strip() for line in content.split("\n")]
    suggestions: List[AISuggestion] = []
    for line in lines:
        match = _NUMBERED_LINE.match(line)
        if match:
            suggestions.append(
                AISuggestion(
                    priority=len(suggestions) + 1,
                    issue=match.group(2).strip(),
                    action="Review and address this issue",
                )
            )
    if suggestions:
        return suggestions

    for line in lines:
        lowered = line.lower()
        if line.startswith(("-", "*")) and any(word in lowered for word in _ACTION_WORDS):
            suggestions.append(
                AISuggestion(
                    priority=len(suggestions) + 1,
                    issue=line.lstrip("-* "),
                    action="Address this item",
                )
            )
    return suggestions


def _reviewer_notes_from_text(content: str) -> List[str]:
    notes: List[str] = []
    in_section = False
    for raw in content.split("\n"):
        line = raw.strip()
        lowered = line.lower()
        if "reviewer" in lowered and "instruction" in lowered:
            in_section = True
            continue
        if in_section and (line.startswith("##") or line.startswith("---")):
            break
        if in_section and len(line) > 10:
            notes.append(line)
    return notes


def _finding_severity(value: str) -> str:
    if value == "high":
        return SEVERITY_HIGH
    if value == "warning":
        return SEVERITY_WARNING
    return SEVERITY_INFO


def _truncate(value: str, limit: int) -> str:
    if len(value) <= limit:
        return value
    return value[: limit - 3] + "..."


def _text(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value


def _list(value: Any, name: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"{name} must be a list")
    return value


def _objects(value: Any, name: str) -> List[Dict[str, Any]]:
    items = _list(value, name)
    if not all(isinstance(item, Mapping) for item in items):
        raise TypeError(f"{name} entries must be objects")
    return items


__all__ = [
    "AIAnalysis",
    "AIInsight",
    "AISuggestion",
    "EXPECTED_JSON_SCHEMA",
    "StoreReadiness",
    "extract_json",
    "parse_plain_text",
    "parse_response",
    "parse_response_strict",
]
