"""Post-processing of raw completions into formatted analyses."""

from .formatter import AnalysisFormatter, extract_section, strip_role_markers
from .lint import MarkdownLinter
from .lists import LineKind, ListNormalizer, classify_line

__all__ = [
    "AnalysisFormatter",
    "LineKind",
    "ListNormalizer",
    "MarkdownLinter",
    "classify_line",
    "extract_section",
    "strip_role_markers",
]
