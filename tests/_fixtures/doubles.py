"""Test doubles shared across the proanalyze suite."""

from __future__ import annotations

from typing import List, Optional, Sequence

from proanalyze.errors import ThrottledError
from proanalyze.models import SourceFile
from proanalyze.prompting.constants import ANALYSIS_SECTIONS


def make_file(path: str, content: str = "print('hello')\n") -> SourceFile:
    name = path.rsplit("/", 1)[-1]
    return SourceFile(name=name, path=path, content=content, size=len(content))


def complete_analysis(**overrides: str) -> str:
    """A well-formed analysis response; pass ``Section_Name=""`` to blank one out."""
    parts = []
    for name in ANALYSIS_SECTIONS:
        key = name.replace(" & ", "_").replace(" ", "_")
        body = overrides.get(key, f"- {name} bullet explaining the project in enough words to be useful.")
        parts.append(f"## {name}\n{body}\n")
    return "\n".join(parts)


class ScriptedCompleter:
    """Plays back a fixed list of outcomes; exceptions are raised, strings returned."""

    def __init__(self, outcomes: Sequence[object]) -> None:
        self.outcomes: List[object] = list(outcomes)
        self.calls: list[dict[str, object]] = []

    async def complete(self, messages, *, max_tokens: Optional[int] = None) -> str:
        self.calls.append({"messages": list(messages), "max_tokens": max_tokens})
        if not self.outcomes:
            raise AssertionError("ScriptedCompleter ran out of outcomes")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return str(outcome)


class RecordingSleeper:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class RecordingEngine:
    """Layout engine double that records DOT sources instead of running dot."""

    def __init__(self) -> None:
        self.sources: list[str] = []

    async def render(self, source: str, *, fmt: str = "svg") -> str:
        self.sources.append(source)
        return f"<svg><!-- {len(self.sources)} --></svg>"


def throttled(status: int = 429) -> ThrottledError:
    return ThrottledError(f"Completion service returned {status}", status_code=status)
