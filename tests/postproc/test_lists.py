"""Tests for line classification and list normalization."""

from __future__ import annotations

import pytest

from proanalyze.postproc import ListNormalizer
from proanalyze.postproc.lists import LineKind, classify_line


@pytest.mark.parametrize(
    ("line", "kind"),
    [
        ("", LineKind.BLANK),
        ("   ", LineKind.BLANK),
        ("```python", LineKind.FENCE),
        ("## Heading", LineKind.HEADING),
        ("- bullet", LineKind.BULLET),
        ("* bullet", LineKind.BULLET),
        ("1. first", LineKind.ORDINAL),
        ("  12) twelfth", LineKind.ORDINAL),
        ("Plain prose.", LineKind.PROSE),
        ("2024 was a year", LineKind.PROSE),
    ],
)
def test_classify_line(line: str, kind: LineKind) -> None:
    assert classify_line(line) is kind


def test_numbered_items_become_bullets_preserving_indent() -> None:
    text = "Intro\n1. First step\n2) Second step\n   3. Nested step\n- Already a bullet"
    assert ListNormalizer().normalize(text) == (
        "Intro\n- First step\n- Second step\n   - Nested step\n- Already a bullet"
    )


def test_code_blocks_are_left_untouched() -> None:
    text = "1. Run it\n```\n1. not a list\n```\n2. Done"
    assert ListNormalizer().normalize(text) == "- Run it\n```\n1. not a list\n```\n- Done"
