"""Tests for prompt construction."""

from __future__ import annotations

from pathlib import Path

from proanalyze.prompting import PromptBuilder
from proanalyze.prompting.constants import ANALYSIS_SECTIONS, SECTION_MIN_BULLETS
from tests._fixtures.doubles import make_file


def test_analysis_request_embeds_files_and_section_contract() -> None:
    builder = PromptBuilder(max_tokens=512)
    files = [make_file("app/main.py", "def main():\n    return 1\n"), make_file("nb/Explore.ipynb", "{}")]

    request = builder.build_analysis_request(files)
    prompt = request.prompt_text

    assert request.purpose == "analysis"
    assert request.max_tokens == 512
    assert [message.role for message in request.messages] == ["system", "user"]
    assert "### app/main.py\n```python\ndef main():" in prompt
    assert "### nb/Explore.ipynb\n```json\n{}" in prompt
    assert request.metadata["files"] == ["app/main.py", "nb/Explore.ipynb"]


def test_analysis_sections_appear_in_fixed_order_with_bullet_minimums() -> None:
    prompt = PromptBuilder().build_analysis_request([make_file("a.py")]).prompt_text

    positions = [prompt.index(f"\n## {name}\n") for name in ANALYSIS_SECTIONS]
    assert positions == sorted(positions)
    workflow_block = prompt[positions[3]:positions[4]]
    assert f"at least {SECTION_MIN_BULLETS['Project Workflow']} bullet points" in workflow_block
    assert "at least 15 words" in prompt


def test_workflow_request_asks_for_minimum_steps_per_role() -> None:
    request = PromptBuilder(min_steps=5).build_workflow_request("  - The user uploads a file.\n")

    assert request.purpose == "workflow"
    assert "- The user uploads a file." in request.prompt_text
    assert "at least 5 system steps and at least 5 user steps" in request.prompt_text
    assert '"isSystem"' in request.prompt_text


def test_question_request_includes_summary_and_project_name() -> None:
    request = PromptBuilder().build_question_request(
        "  How is configuration loaded?  ",
        [make_file("config.py", "import yaml\n")],
        project_name="demo",
        summary="A small CLI.",
    )

    prompt = request.prompt_text
    assert 'called "demo"' in prompt
    assert "Project summary:\nA small CLI." in prompt
    assert prompt.rstrip().endswith("Question: How is configuration loaded?")


def test_question_request_omits_empty_summary() -> None:
    prompt = PromptBuilder().build_question_request("Why?", [make_file("a.py")]).prompt_text
    assert "Project summary" not in prompt
    assert "called" not in prompt


def test_custom_templates_override_defaults(tmp_path: Path) -> None:
    (tmp_path / "workflow.j2").write_text("STEPS >= {{ min_steps }}: {{ workflow }}", encoding="utf-8")
    request = PromptBuilder(tmp_path, min_steps=3).build_workflow_request("flow")

    assert request.prompt_text == "STEPS >= 3: flow"
    assert request.messages[1].role == "user"
