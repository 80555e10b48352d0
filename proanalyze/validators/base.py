"""Core validation data structures for formatted analysis sections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Protocol


@dataclass
class ValidationIssue:
    """Represents a single validation failure for an analysis section."""

    section: str
    detail: str


@dataclass
class ValidationContext:
    """Extracted sections handed to validators, keyed by heading text."""

    sections: Mapping[str, str]


class Validator(Protocol):
    """Protocol implemented by section validators."""

    name: str

    def validate(self, context: ValidationContext) -> List[ValidationIssue]:
        """Run validation and return any issues."""
