"""Line classification and list normalization for generated markdown."""

from __future__ import annotations

import re
from enum import Enum
from typing import List

_FENCE = re.compile(r"^\s*(```|~~~)")
_HEADING = re.compile(r"^\s{0,3}#{1,6}\s")
_BULLET = re.compile(r"^\s*[-*+•]\s+")
_ORDINAL = re.compile(r"^(?P<indent>\s*)\d+[.)]\s+(?P<body>.*)$")


class LineKind(Enum):
    BLANK = "blank"
    FENCE = "fence"
    HEADING = "heading"
    BULLET = "bullet"
    ORDINAL = "ordinal"
    PROSE = "prose"


class _State(Enum):
    TEXT = "text"
    CODE = "code"


def classify_line(line: str) -> LineKind:
    if not line.strip():
        return LineKind.BLANK
    if _FENCE.match(line):
        return LineKind.FENCE
    if _HEADING.match(line):
        return LineKind.HEADING
    if _BULLET.match(line):
        return LineKind.BULLET
    if _ORDINAL.match(line):
        return LineKind.ORDINAL
    return LineKind.PROSE


class ListNormalizer:
    """Rewrites numbered list items as ``- `` bullets.

    Bullets, headings and prose pass through unchanged; everything between
    code fences is left verbatim.
    """

    def normalize(self, text: str) -> str:
        state = _State.TEXT
        output: List[str] = []
        for line in text.split("\n"):
            kind = classify_line(line)
            if state is _State.CODE:
                output.append(line)
                if kind is LineKind.FENCE:
                    state = _State.TEXT
                continue
            if kind is LineKind.FENCE:
                state = _State.CODE
                output.append(line)
            elif kind is LineKind.ORDINAL:
                output.append(self._ordinal_to_bullet(line))
            else:
                output.append(line)
        return "\n".join(output)

    @staticmethod
    def _ordinal_to_bullet(line: str) -> str:
        match = _ORDINAL.match(line)
        if match is None:  # pragma: no cover - guarded by classify_line
            return line
        return f"{match.group('indent')}- {match.group('body')}"


__all__ = ["LineKind", "ListNormalizer", "classify_line"]
