"""Builds prompts for the completion service from Jinja templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import SourceFile
from .constants import (
    ANALYSIS_SECTIONS,
    MIN_BULLET_WORDS,
    SECTION_GUIDANCE,
    SECTION_MIN_BULLETS,
)

_FENCE_BY_SUFFIX = {
    ".py": "python",
    ".ipynb": "json",
}


@dataclass(frozen=True)
class PromptMessage:
    """Represents a single chat message for LLM prompting."""

    role: str
    content: str


@dataclass
class PromptRequest:
    """Messages and token budget for one completion call."""

    purpose: str
    messages: List[PromptMessage]
    max_tokens: int | None
    metadata: Dict[str, object] = field(default_factory=dict)

    @property
    def prompt_text(self) -> str:
        return "\n\n".join(message.content for message in self.messages if message.role == "user")


class PromptBuilder:
    """Renders the analysis, workflow, and question prompts."""

    SYSTEM_PROMPT = (
        "You are a senior Python reviewer. Stay grounded in the code you are shown, "
        "follow the requested output format exactly, and never invent files or libraries."
    )

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        max_tokens: int | None = None,
        min_steps: int = 4,
    ) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self.max_tokens = max_tokens
        self.min_steps = min_steps
        self._env = self._create_env(self.templates_dir)

    def build_analysis_request(self, files: Sequence[SourceFile]) -> PromptRequest:
        """Embed the selected files plus the fixed output contract."""
        template = self._env.get_template("analysis.j2")
        sections = [
            {
                "name": name,
                "guidance": SECTION_GUIDANCE[name],
                "min_bullets": SECTION_MIN_BULLETS[name],
            }
            for name in ANALYSIS_SECTIONS
        ]
        prompt = template.render(
            files=self._file_context(files),
            sections=sections,
            min_bullet_words=MIN_BULLET_WORDS,
        )
        return self._request(
            "analysis",
            prompt,
            metadata={"files": [file.path for file in files], "prompt_chars": len(prompt)},
        )

    def build_workflow_request(self, workflow_text: str) -> PromptRequest:
        template = self._env.get_template("workflow.j2")
        prompt = template.render(workflow=workflow_text.strip(), min_steps=self.min_steps)
        return self._request("workflow", prompt)

    def build_question_request(
        self,
        question: str,
        files: Sequence[SourceFile],
        *,
        project_name: str | None = None,
        summary: str | None = None,
    ) -> PromptRequest:
        template = self._env.get_template("chat.j2")
        prompt = template.render(
            question=question.strip(),
            files=self._file_context(files),
            project_name=project_name or "",
            summary=(summary or "").strip(),
        )
        return self._request("question", prompt, metadata={"files": [file.path for file in files]})

    def _request(
        self,
        purpose: str,
        prompt: str,
        *,
        metadata: Dict[str, object] | None = None,
    ) -> PromptRequest:
        messages = [
            PromptMessage(role="system", content=self.SYSTEM_PROMPT),
            PromptMessage(role="user", content=prompt.strip()),
        ]
        return PromptRequest(
            purpose=purpose,
            messages=messages,
            max_tokens=self.max_tokens,
            metadata=dict(metadata or {}),
        )

    @staticmethod
    def _file_context(files: Sequence[SourceFile]) -> List[Dict[str, str]]:
        return [
            {
                "path": file.path or file.name,
                "fence": _FENCE_BY_SUFFIX.get(file.suffix, ""),
                "content": file.content,
            }
            for file in files
        ]

    @staticmethod
    def _create_env(templates_dir: Path) -> Environment:
        directories: list[str] = [str(templates_dir)]
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        loader = FileSystemLoader(directories)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )


__all__ = ["PromptBuilder", "PromptMessage", "PromptRequest"]
