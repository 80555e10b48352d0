"""Whitespace clean-up for generated markdown."""

from __future__ import annotations

from typing import List

from .lists import LineKind, classify_line


class MarkdownLinter:
    """Normalises line endings, trailing spaces and runs of blank lines."""

    def lint(self, markdown: str) -> str:
        normalized = markdown.replace("\r\n", "\n").replace("\r", "\n")
        cleaned: List[str] = []
        in_code = False
        previous_blank = False

        for line in normalized.split("\n"):
            stripped = line.rstrip()
            kind = classify_line(stripped)
            if kind is LineKind.FENCE:
                in_code = not in_code
            elif kind is LineKind.BLANK and not in_code:
                if previous_blank:
                    continue
                previous_blank = True
                cleaned.append("")
                continue
            cleaned.append(stripped)
            previous_blank = False

        return "\n".join(cleaned).strip("\n")
