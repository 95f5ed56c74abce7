"""Copy-paste AI compliance prompt generation."""

from .builder import PromptBuilder
from .constants import TEMPLATE_COMPREHENSIVE, TEMPLATE_FILES, TEMPLATE_SUMMARY
from .data import PromptData, build_prompt_data

__all__ = [
    "PromptBuilder",
    "PromptData",
    "TEMPLATE_COMPREHENSIVE",
    "TEMPLATE_FILES",
    "TEMPLATE_SUMMARY",
    "build_prompt_data",
]
