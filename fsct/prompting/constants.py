"""Shared constants for the copy-paste compliance prompt."""

from __future__ import annotations

TEMPLATE_COMPREHENSIVE = "comprehensive"
TEMPLATE_SUMMARY = "summary"

TEMPLATE_FILES: dict[str, str] = {
    TEMPLATE_COMPREHENSIVE: "prompt_comprehensive.md.j2",
    TEMPLATE_SUMMARY: "prompt_summary.md.j2",
}

SUPPORTED_ASSISTANTS: tuple[str, ...] = ("ChatGPT", "Claude", "Gemini")


__all__ = [
    "SUPPORTED_ASSISTANTS",
    "TEMPLATE_COMPREHENSIVE",
    "TEMPLATE_FILES",
    "TEMPLATE_SUMMARY",
]
