"""Tests for response cleanup, section extraction and rebuilding."""

from __future__ import annotations

from proanalyze.postproc import AnalysisFormatter, MarkdownLinter
from proanalyze.postproc.formatter import extract_section, strip_role_markers
from proanalyze.prompting.constants import ANALYSIS_SECTIONS, PLACEHOLDER_TEXT
from tests._fixtures.doubles import complete_analysis


def test_strip_role_markers_removes_dialogue_framing() -> None:
    raw = "<s>[INST] ignored [/INST]\nassistant: ## Project Overview\r\nbody</s>"
    assert strip_role_markers(raw) == " ignored \n## Project Overview\nbody"


def test_extract_section_stops_at_next_heading() -> None:
    text = "## Key Features\n- one\n- two\n## Project Workflow\n- flow"
    assert extract_section(text, "Key Features") == "\n- one\n- two\n"
    assert extract_section(text, "Project Workflow") == "\n- flow"


def test_extract_section_is_case_sensitive_and_anchored() -> None:
    text = "## project workflow\n- lower\nSee ## Project Workflow inline\n"
    assert extract_section(text, "Project Workflow") is None


def test_extract_section_tolerates_trailing_whitespace_only() -> None:
    assert extract_section("## Project Workflow  \n- flow", "Project Workflow") == "\n- flow"
    assert extract_section("## Project Workflow Extra\n- flow", "Project Workflow") is None


def test_format_rebuilds_sections_in_fixed_order() -> None:
    raw = complete_analysis()
    # Shuffle the first two sections to prove the output order is fixed.
    first, second = raw.split("## Key Features")
    reordered = "## Key Features" + second + "\n" + first

    result = AnalysisFormatter().format(reordered)

    assert result is not None
    assert list(result.sections) == list(ANALYSIS_SECTIONS)
    positions = [result.full_text.index(f"## {name}") for name in ANALYSIS_SECTIONS]
    assert positions == sorted(positions)
    assert not result.full_text.endswith("\n")


def test_format_fills_missing_noncritical_sections_with_placeholder() -> None:
    raw = complete_analysis().replace("## Implementation Details", "## Something Else")
    result = AnalysisFormatter().format(raw)

    assert result is not None
    assert result.section("Implementation Details") == PLACEHOLDER_TEXT
    assert f"## Implementation Details\n{PLACEHOLDER_TEXT}" in result.full_text


def test_format_signals_regeneration_when_critical_section_empty() -> None:
    formatter = AnalysisFormatter()
    assert formatter.format(complete_analysis(Project_Strengths="")) is None
    assert [issue.section for issue in formatter.last_issues] == ["Project Strengths"]


def test_format_normalizes_numbered_lists() -> None:
    raw = complete_analysis(Project_Workflow="1. The user runs the CLI.\n2. The system loads files.")
    result = AnalysisFormatter().format(raw)

    assert result is not None
    assert result.section("Project Workflow") == "- The user runs the CLI.\n- The system loads files."


def test_linter_collapses_blank_runs_outside_code() -> None:
    text = "\n\nline one   \n\n\n\nline two\n```\n\n\n```\n\n"
    assert MarkdownLinter().lint(text) == "line one\n\nline two\n```\n\n\n```"
