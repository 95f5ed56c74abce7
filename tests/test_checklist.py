from __future__ import annotations

import pytest

from fsct.checklist import generate_checklist
from fsct.config import ReviewerConfig, VerificationConfig


def _ids(items):
    return [item.id for item in items]


def test_missing_reviewer_config_yields_single_required_item() -> None:
    checklist = generate_checklist(None)

    assert _ids(checklist.items) == ["config"]
    assert not checklist.is_ready()
    assert checklist.completion_percent() == 0
    assert "0/1 required items complete" in checklist.to_console()


def test_configured_account_is_ready() -> None:
    config = ReviewerConfig(email="reviewer@acme.io", password="Zk7#mQ2!vT")

    checklist = generate_checklist(config)

    assert _ids(checklist.required_items) == ["email", "password", "valid"]
    assert _ids(checklist.recommended_items) == [
        "strong",
        "test_data",
        "demo_mode",
        "instructions",
        "screenshots",
    ]
    assert checklist.is_ready()
    assert checklist.items[0].description == "Reviewer email configured (re***@acme.io)"
    assert checklist.items[3].checked
    assert checklist.completed_count == 4
    assert checklist.completion_percent() == 50


def test_placeholder_email_and_weak_password_are_unchecked(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REVIEWER_PASSWORD", "password1")
    config = ReviewerConfig(email="test@example.com")

    checklist = generate_checklist(config)
    by_id = {item.id: item for item in checklist.items}

    assert checklist.password_configured
    assert by_id["password"].checked
    assert not by_id["valid"].checked
    assert not by_id["strong"].checked
    assert not checklist.is_ready()


def test_verification_item_only_when_enabled() -> None:
    enabled = ReviewerConfig(
        email="reviewer@acme.io",
        verification=VerificationConfig(enabled=True, auth_endpoint="https://api.acme.io/login"),
    )

    assert "verify" in _ids(generate_checklist(enabled).items)
    assert "verify" not in _ids(generate_checklist(ReviewerConfig(email="reviewer@acme.io")).items)


def test_markdown_and_console_outputs() -> None:
    checklist = generate_checklist(ReviewerConfig(email="reviewer@acme.io", password="Zk7#mQ2!vT"))

    markdown = checklist.to_markdown()
    console = checklist.to_console()

    assert markdown.startswith("# Reviewer Account Checklist\n\n## Required Items\n\n- [x] Reviewer email")
    assert "- [ ] Test data is pre-populated in the app" in markdown
    assert "- **Required**: 3/3 complete" in markdown
    assert "- **Recommended**: 1/5 complete" in markdown
    assert markdown.rstrip().endswith("**Ready for submission!**")
    assert "  REVIEWER ACCOUNT CHECKLIST" in console
    assert "  [x] Reviewer password configured" in console
    assert console.rstrip().endswith("Ready for submission!")


def test_html_output_escapes_descriptions() -> None:
    checklist = generate_checklist(ReviewerConfig(email="<b>@acme.io"))

    html = checklist.to_html()

    assert html.startswith("<!DOCTYPE html>")
    assert "(&lt;b***@acme.io)" in html
    assert "Complete required items before submission" in html
    assert "<strong>Required:</strong> 2/3 complete" in html
