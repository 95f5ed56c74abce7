"""Base class for compliance checks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from ..models import Finding, category_for_id
from ..project import Project


class Check(ABC):
    """Contract for checks that inspect a project snapshot.

    ``run`` must be deterministic for a given snapshot. Only the AI checks and
    the reviewer login verification are allowed to touch the network.
    """

    id: str = ""
    name: str = ""

    @property
    def category(self) -> str:
        return category_for_id(self.id)

    @abstractmethod
    def run(self, project: Project) -> List[Finding]:
        """Return the findings for ``project`` (empty when the check passes)."""

    def finding(
        self,
        severity: str,
        message: str,
        *,
        file: str = "",
        suggestion: str = "",
        line: int = 0,
        title: str | None = None,
        finding_id: str | None = None,
    ) -> Finding:
        return Finding(
            id=finding_id or self.id,
            severity=severity,
            title=title or self.name,
            message=message,
            file=file,
            line=line,
            suggestion=suggestion,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"


__all__ = ["Check"]
