"""Canned workflow steps used when extraction returns too few."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .models import WorkflowStep

_SYSTEM_FALLBACKS: Tuple[Tuple[str, str], ...] = (
    ("Receive input", "The system accepts the incoming request or data and checks that it is well formed."),
    ("Load configuration", "Settings and dependencies needed for processing are loaded and initialised."),
    ("Process data", "The core logic transforms the input according to the project's rules."),
    ("Produce output", "Results are assembled, stored or returned to the caller."),
)

_USER_FALLBACKS: Tuple[Tuple[str, str], ...] = (
    ("Open the application", "The user launches the tool or opens its entry point."),
    ("Provide input", "The user supplies the data, options or files the project works on."),
    ("Run the operation", "The user triggers the main action and waits for it to finish."),
    ("Review results", "The user inspects the output and decides on next steps."),
)


def fallback_steps(*, is_system: bool) -> List[WorkflowStep]:
    """Return the full canned sequence for one role."""
    prefix = "system" if is_system else "user"
    source = _SYSTEM_FALLBACKS if is_system else _USER_FALLBACKS
    return [
        WorkflowStep(
            id=f"{prefix}-fallback-{index}",
            title=title,
            description=description,
            is_system=is_system,
        )
        for index, (title, description) in enumerate(source, start=1)
    ]


def pad_steps(steps: Sequence[WorkflowStep], *, is_system: bool, minimum: int = 4) -> List[WorkflowStep]:
    """Append canned steps after the real ones until ``minimum`` is reached.

    Padding continues the canned sequence from the current length, so two real
    steps are followed by canned steps three and four. Past the canned list the
    last canned step is repeated with a numbered id.
    """
    padded = list(steps)
    canned = fallback_steps(is_system=is_system)
    while len(padded) < minimum:
        position = len(padded)
        if position < len(canned):
            padded.append(canned[position])
            continue
        last = canned[-1]
        padded.append(
            WorkflowStep(
                id=f"{last.id}-{position + 1}",
                title=last.title,
                description=last.description,
                is_system=is_system,
            )
        )
    return padded


__all__ = ["fallback_steps", "pad_steps"]
