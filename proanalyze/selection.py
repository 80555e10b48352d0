"""Selects eligible source files and scrubs them before prompting."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Iterable, List

from .config import AnalysisConfig
from .models import SourceFile

ELIGIBLE_SUFFIXES = frozenset({".py", ".ipynb"})
TRUNCATION_MARKER = "\n... (truncated)"
REDACTED_VALUE = '"***"'
ENV_PLACEHOLDER = "<environment>"

# ``api_key = "..."``, ``DB_PASSWORD: '...'``, ``client_secret="..."`` and friends.
_SECRET_ASSIGNMENT = re.compile(
    r"""\b(?P<name>[A-Za-z_]*(?:api_?key|password|passwd|secret|token)[A-Za-z0-9_]*)"""
    r"""\s*[:=]\s*(?P<quote>["'])(?P<value>.*?)(?P=quote)""",
    re.IGNORECASE,
)
_ENV_ACCESS = re.compile(
    r"""os\.environ(?:\.get\([^)]*\)|\[[^\]]*\])?|os\.getenv\([^)]*\)"""
)


def is_eligible(file: SourceFile) -> bool:
    """Return True for Python sources and notebooks."""
    return file.suffix in ELIGIBLE_SUFFIXES


def sanitize_content(content: str) -> str:
    """Redact secret assignments and environment lookups.

    The rewrite is idempotent: redacted output contains nothing either
    pattern can match with a different result.
    """
    redacted = _SECRET_ASSIGNMENT.sub(lambda match: f"{match.group('name')} = {REDACTED_VALUE}", content)
    return _ENV_ACCESS.sub(ENV_PLACEHOLDER, redacted)


def truncate_content(content: str, limit: int) -> str:
    if len(content) <= limit:
        return content
    return content[:limit] + TRUNCATION_MARKER


def select_files(files: Iterable[SourceFile], config: AnalysisConfig) -> List[SourceFile]:
    """Pick at most ``config.max_files`` eligible files, sanitized then truncated.

    Truncation runs last so every returned file honours
    ``max_file_content_chars + len(TRUNCATION_MARKER)``.
    """
    selected: List[SourceFile] = []
    for file in files:
        if len(selected) >= config.max_files:
            break
        if not is_eligible(file):
            continue
        content = truncate_content(sanitize_content(file.content), config.max_file_content_chars)
        selected.append(replace(file, content=content))
    return selected


__all__ = [
    "ELIGIBLE_SUFFIXES",
    "TRUNCATION_MARKER",
    "is_eligible",
    "sanitize_content",
    "select_files",
    "truncate_content",
]
