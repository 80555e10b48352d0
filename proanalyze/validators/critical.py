"""Checks that the sections the diagrams and verdict depend on are present."""

from __future__ import annotations

from typing import Iterable, List

from ..prompting.constants import ANALYSIS_SECTIONS, CRITICAL_SECTIONS
from .base import ValidationContext, ValidationIssue


class CriticalSectionValidator:
    """Flags every critical section that is missing or empty."""

    name = "critical_sections"

    def __init__(self, required: Iterable[str] = CRITICAL_SECTIONS) -> None:
        required_set = set(required)
        # Report in document order so log output is stable.
        self.required = [name for name in ANALYSIS_SECTIONS if name in required_set]
        self.required.extend(sorted(required_set.difference(ANALYSIS_SECTIONS)))

    def validate(self, context: ValidationContext) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        for name in self.required:
            body = context.sections.get(name)
            if body is None or not body.strip():
                issues.append(ValidationIssue(section=name, detail=f"Section '{name}' is missing or empty"))
        return issues
