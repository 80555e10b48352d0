"""Validation package for formatted analysis output."""

from .base import ValidationContext, ValidationIssue, Validator
from .critical import CriticalSectionValidator

__all__ = [
    "CriticalSectionValidator",
    "ValidationContext",
    "ValidationIssue",
    "Validator",
]
