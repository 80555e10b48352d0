"""Turns a raw completion into a validated, fixed-order analysis."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional

from ..logging import get_logger
from ..models import AnalysisResult
from ..prompting.constants import ANALYSIS_SECTIONS, PLACEHOLDER_TEXT
from ..validators import CriticalSectionValidator, ValidationContext, ValidationIssue, Validator
from .lint import MarkdownLinter
from .lists import ListNormalizer

_ROLE_MARKER = re.compile(r"^[ \t]*(?:system|assistant|user):[ \t]*", re.IGNORECASE | re.MULTILINE)
_FRAMING_TOKEN = re.compile(r"</?s>|\[/?INST\]")
_NEXT_HEADING = re.compile(r"^##[ \t]", re.MULTILINE)


def strip_role_markers(text: str) -> str:
    """Remove dialogue framing the model echoed back."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _FRAMING_TOKEN.sub("", text)
    return _ROLE_MARKER.sub("", text)


def extract_section(text: str, name: str) -> Optional[str]:
    """Return the text between ``## <name>`` and the next ``## `` heading.

    Matching is case-sensitive and anchored to the start of a line; only
    trailing whitespace after the heading text is tolerated.
    """
    heading = re.compile(rf"^## {re.escape(name)}[ \t]*$", re.MULTILINE)
    match = heading.search(text)
    if match is None:
        return None
    following = _NEXT_HEADING.search(text, match.end())
    end = following.start() if following else len(text)
    return text[match.end():end]


class AnalysisFormatter:
    """Extracts, validates and rebuilds the fixed analysis sections.

    ``format`` returns ``None`` when a critical section is missing, which the
    orchestrator treats exactly like a failed call: it regenerates.
    """

    def __init__(
        self,
        validators: Iterable[Validator] | None = None,
        *,
        normalizer: ListNormalizer | None = None,
        linter: MarkdownLinter | None = None,
    ) -> None:
        self.validators: List[Validator] = (
            list(validators) if validators is not None else [CriticalSectionValidator()]
        )
        self.normalizer = normalizer or ListNormalizer()
        self.linter = linter or MarkdownLinter()
        self.logger = get_logger("formatter")
        self.last_issues: List[ValidationIssue] = []

    def format(self, raw: str) -> Optional[AnalysisResult]:
        text = strip_role_markers(raw).strip()
        extracted = self.extract_sections(text)

        context = ValidationContext(sections=extracted)
        issues = [issue for validator in self.validators for issue in validator.validate(context)]
        self.last_issues = issues
        if issues:
            self.logger.warning(
                "Response failed validation: %s", "; ".join(issue.detail for issue in issues)
            )
            return None

        sections = {name: extracted.get(name, PLACEHOLDER_TEXT) for name in ANALYSIS_SECTIONS}
        full_text = self.linter.lint(
            "\n\n".join(f"## {name}\n{body}" for name, body in sections.items())
        )
        return AnalysisResult(full_text=full_text, sections=sections)

    def extract_sections(self, text: str) -> Dict[str, str]:
        """Map each present, non-empty fixed section to its normalized body."""
        extracted: Dict[str, str] = {}
        for name in ANALYSIS_SECTIONS:
            body = extract_section(text, name)
            if body is None:
                continue
            cleaned = self.linter.lint(self.normalizer.normalize(body)).strip()
            if cleaned:
                extracted[name] = cleaned
        return extracted


__all__ = ["AnalysisFormatter", "extract_section", "strip_role_markers"]
