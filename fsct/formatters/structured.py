"""Machine-readable JSON and YAML reports sharing one envelope."""

from __future__ import annotations

import json
from typing import Sequence

import yaml

from ..models import Finding, Report, Summary
from .base import Formatter


class JSONFormatter(Formatter):
    name = "json"
    extension = "json"

    def build_report(self, findings: Sequence[Finding], summary: Summary) -> Report:
        return Report(timestamp=self.timestamp(), summary=summary, findings=list(findings))

    def format(self, findings: Sequence[Finding], summary: Summary) -> str:
        payload = self.build_report(findings, summary).to_dict()
        return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


class YAMLFormatter(JSONFormatter):
    """Same document as :class:`JSONFormatter`, emitted as block-style YAML."""

    name = "yaml"
    extension = "yaml"

    def format(self, findings: Sequence[Finding], summary: Summary) -> str:
        payload = self.build_report(findings, summary).to_dict()
        return yaml.safe_dump(
            payload,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )


def load_report(text: str) -> Report:
    """Parse a JSON report produced by :class:`JSONFormatter`."""
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Report must be a JSON object")
    return Report.from_dict(data)


__all__ = ["JSONFormatter", "YAMLFormatter", "load_report"]
