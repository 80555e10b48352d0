"""Prompt construction for the analysis, workflow, and question requests."""

from .builder import PromptBuilder, PromptMessage, PromptRequest
from .constants import ANALYSIS_SECTIONS, CRITICAL_SECTIONS, PLACEHOLDER_TEXT

__all__ = [
    "ANALYSIS_SECTIONS",
    "CRITICAL_SECTIONS",
    "PLACEHOLDER_TEXT",
    "PromptBuilder",
    "PromptMessage",
    "PromptRequest",
]
