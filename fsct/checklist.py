"""Reviewer readiness checklist (``fsct checklist``)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .checks.reviewer import mask_email
from .config import ReviewerConfig
from .templating import render_template

CHECKLIST_PLACEHOLDERS = ("test@", "example.com", "your-email@")
CHECKLIST_WEAK_PATTERNS = ("password", "123456", "qwerty", "admin")


@dataclass
class ChecklistItem:
    id: str
    description: str
    checked: bool = False
    required: bool = False


@dataclass
class ReviewerChecklist:
    """Items a release manager ticks off before handing an account to reviewers."""

    items: List[ChecklistItem] = field(default_factory=list)
    email_configured: bool = False
    password_configured: bool = False

    @property
    def required_items(self) -> List[ChecklistItem]:
        return [item for item in self.items if item.required]

    @property
    def recommended_items(self) -> List[ChecklistItem]:
        return [item for item in self.items if not item.required]

    @property
    def completed_count(self) -> int:
        return sum(1 for item in self.items if item.checked)

    def is_ready(self) -> bool:
        return all(item.checked for item in self.required_items)

    def completion_percentage(self) -> float:
        if not self.items:
            return 100.0
        return self.completed_count / len(self.items) * 100

    def completion_percent(self) -> int:
        return int(self.completion_percentage())

    def to_markdown(self) -> str:
        required = self.required_items
        recommended = self.recommended_items
        lines = ["# Reviewer Account Checklist", "", "## Required Items", ""]
        lines.extend(f"- {_box(item)} {item.description}" for item in required)
        lines.extend(["", "## Recommended Items", ""])
        lines.extend(f"- {_box(item)} {item.description}" for item in recommended)
        lines.extend(
            [
                "",
                "## Status Summary",
                "",
                f"- **Required**: {_done(required)}/{len(required)} complete",
                f"- **Recommended**: {_done(recommended)}/{len(recommended)} complete",
                "",
            ]
        )
        if self.is_ready():
            lines.append("**Ready for submission!**")
        else:
            lines.append("**Complete required items before submission**")
        return "\n".join(lines) + "\n"

    def to_console(self) -> str:
        rule = "=" * 79
        lines = [rule, "  REVIEWER ACCOUNT CHECKLIST", rule, "", "Required Items:"]
        lines.extend(
            f"  [{'x' if item.checked else ' '}] {item.description}" for item in self.required_items
        )
        lines.extend(["", "Recommended Items:"])
        lines.extend(
            f"  [{'x' if item.checked else ' '}] {item.description}"
            for item in self.recommended_items
        )
        lines.append("")
        required = self.required_items
        if self.is_ready():
            lines.append("Ready for submission!")
        else:
            lines.append(f"{_done(required)}/{len(required)} required items complete")
        return "\n".join(lines) + "\n"

    def to_html(self) -> str:
        required = self.required_items
        return render_template(
            "checklist.html.j2",
            required=required,
            recommended=self.recommended_items,
            required_done=_done(required),
            ready=self.is_ready(),
        )


def generate_checklist(config: Optional[ReviewerConfig]) -> ReviewerChecklist:
    """Build the checklist from the reviewer configuration (``None`` when unconfigured)."""
    checklist = ReviewerChecklist()
    if config is None:
        checklist.items.append(
            ChecklistItem(
                "config", "Reviewer configuration file (.fsct.yaml) exists", required=True
            )
        )
        return checklist

    email = config.resolve_email()
    password = config.resolve_password()
    checklist.email_configured = bool(email)
    checklist.password_configured = bool(password)

    lowered_email = email.lower()
    placeholder = bool(email) and any(p in lowered_email for p in CHECKLIST_PLACEHOLDERS)
    lowered_password = password.lower()
    weak = bool(password) and (
        len(password) < 8 or any(p in lowered_password for p in CHECKLIST_WEAK_PATTERNS)
    )

    checklist.items.extend(
        [
            ChecklistItem(
                "email",
                f"Reviewer email configured ({mask_email(email)})",
                checked=checklist.email_configured,
                required=True,
            ),
            ChecklistItem(
                "password",
                "Reviewer password configured",
                checked=checklist.password_configured,
                required=True,
            ),
            ChecklistItem(
                "valid",
                "Credentials are valid (not placeholders)",
                checked=checklist.email_configured and not placeholder,
                required=True,
            ),
            ChecklistItem(
                "strong",
                "Password is strong (8+ chars, no common patterns)",
                checked=checklist.password_configured and not weak,
            ),
        ]
    )
    if config.verification_enabled:
        checklist.items.append(ChecklistItem("verify", "Login verification enabled and tested"))
    checklist.items.extend(
        [
            ChecklistItem("test_data", "Test data is pre-populated in the app"),
            ChecklistItem("demo_mode", "Demo mode or test mode is clearly marked"),
            ChecklistItem("instructions", "Reviewer instructions document prepared"),
            ChecklistItem("screenshots", "Screenshots show login flow"),
        ]
    )
    return checklist


def _box(item: ChecklistItem) -> str:
    return "[x]" if item.checked else "[ ]"


def _done(items: List[ChecklistItem]) -> int:
    return sum(1 for item in items if item.checked)


__all__ = ["ChecklistItem", "ReviewerChecklist", "generate_checklist"]
