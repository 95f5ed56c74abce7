"""Renders the AI compliance prompt users paste into their assistant."""

from __future__ import annotations

from typing import List

from ..templating import render_template
from .constants import SUPPORTED_ASSISTANTS, TEMPLATE_COMPREHENSIVE, TEMPLATE_FILES
from .data import PromptData

_BOX_WIDTH = 79


class PromptBuilder:
    """Turns :class:`PromptData` into prompt text using a named template."""

    def __init__(self, template_type: str = TEMPLATE_COMPREHENSIVE) -> None:
        template_type = (template_type or TEMPLATE_COMPREHENSIVE).lower()
        if template_type not in TEMPLATE_FILES:
            raise ValueError(
                f"Unknown prompt template '{template_type}'. "
                f"Choose one of: {', '.join(sorted(TEMPLATE_FILES))}"
            )
        self.template_type = template_type

    @property
    def template_name(self) -> str:
        return TEMPLATE_FILES[self.template_type]

    def generate(self, data: PromptData) -> str:
        return render_template(self.template_name, data=data)

    def generate_with_header(self, data: PromptData) -> str:
        """Wrap the prompt with copy instructions, stats and usage tips."""
        prompt = self.generate(data)
        heavy = "═" * _BOX_WIDTH
        light = "─" * _BOX_WIDTH
        lines: List[str] = [
            "╔" + heavy + "╗",
            "║" + "📋 AI COMPLIANCE PROMPT - COPY & PASTE INTO YOUR AI ASSISTANT".center(_BOX_WIDTH - 1) + "║",
            "╚" + heavy + "╝",
            "",
            "INSTRUCTIONS:",
            "1. Copy everything between the START and END markers below",
            f"2. Paste it into {', '.join(SUPPORTED_ASSISTANTS[:-1])}, or {SUPPORTED_ASSISTANTS[-1]}",
            "3. Review the recommendations and apply the fixes",
            "4. Re-run fsct to confirm the issues are resolved",
            "",
            "PROMPT STATS:",
            f"• Character count: {len(prompt):,}",
            f"• Estimated tokens: ~{len(prompt) // 4:,}",
            f"• Template: {self.template_type}",
            "",
            light,
            "START OF PROMPT",
            light,
            "",
            prompt.rstrip("\n"),
            "",
            light,
            "END OF PROMPT",
            light,
            "",
            "💡 TIPS FOR BEST RESULTS:",
            "• Use the most capable model your assistant offers",
            "• Ask follow-up questions about specific fixes",
            "• Request code snippets for each configuration change",
            "",
            "🚀 WANT AUTOMATIC ANALYSIS?",
            "Set an API key and let fsct call the model for you:",
            "  export AI_API_KEY=your-key",
            "  fsct check . --ai",
            "",
        ]
        return "\n".join(lines)


__all__ = ["PromptBuilder"]
