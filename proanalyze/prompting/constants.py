"""Shared constants for analysis prompting and formatting."""

from __future__ import annotations

ANALYSIS_SECTIONS: tuple[str, ...] = (
    "Project Overview",
    "Key Features",
    "Libraries & Dependencies",
    "Project Workflow",
    "Implementation Details",
    "Project Strengths",
    "Areas for Improvement",
)

CRITICAL_SECTIONS: frozenset[str] = frozenset(
    {"Project Workflow", "Project Strengths", "Areas for Improvement"}
)

# Minimum bullet count requested per section in the output contract.
SECTION_MIN_BULLETS: dict[str, int] = {
    "Project Overview": 3,
    "Key Features": 5,
    "Libraries & Dependencies": 4,
    "Project Workflow": 6,
    "Implementation Details": 5,
    "Project Strengths": 4,
    "Areas for Improvement": 4,
}

SECTION_GUIDANCE: dict[str, str] = {
    "Project Overview": "Describe the main purpose, the problem it solves, and who uses it.",
    "Key Features": "List the main capabilities and point at the files or functions implementing them.",
    "Libraries & Dependencies": "Name each key library and state what the project uses it for.",
    "Project Workflow": (
        "Walk through the workflow in execution order. Cover both what the system does "
        "internally and what a user does when interacting with it."
    ),
    "Implementation Details": "Describe notable patterns, data structures, and techniques.",
    "Project Strengths": "Highlight design and code-quality strengths with concrete evidence.",
    "Areas for Improvement": "Give actionable improvements, each tied to a specific weakness.",
}

MIN_BULLET_WORDS = 15

PLACEHOLDER_TEXT = "No information available."

NO_ELIGIBLE_FILES_MESSAGE = (
    "## Project Analysis\n\n"
    "This repository does not contain any Python files (.py or .ipynb). "
    "Please try analyzing a Python project."
)


__all__ = [
    "ANALYSIS_SECTIONS",
    "CRITICAL_SECTIONS",
    "MIN_BULLET_WORDS",
    "NO_ELIGIBLE_FILES_MESSAGE",
    "PLACEHOLDER_TEXT",
    "SECTION_GUIDANCE",
    "SECTION_MIN_BULLETS",
]
