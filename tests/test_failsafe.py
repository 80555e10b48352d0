"""Tests for canned workflow steps and padding."""

from __future__ import annotations

from proanalyze.failsafe import fallback_steps, pad_steps
from proanalyze.models import WorkflowStep


def _step(index: int, *, is_system: bool) -> WorkflowStep:
    return WorkflowStep(id=f"real-{index}", title=f"Real {index}", description="", is_system=is_system)


def test_fallback_sequences_have_four_steps_per_role() -> None:
    system = fallback_steps(is_system=True)
    user = fallback_steps(is_system=False)

    assert len(system) == len(user) == 4
    assert all(step.is_system for step in system)
    assert not any(step.is_system for step in user)
    assert system[0].id == "system-fallback-1"


def test_padding_continues_canned_sequence_after_real_steps() -> None:
    real = [_step(1, is_system=True), _step(2, is_system=True)]
    padded = pad_steps(real, is_system=True)

    assert [step.id for step in padded] == ["real-1", "real-2", "system-fallback-3", "system-fallback-4"]


def test_padding_leaves_long_sequences_alone() -> None:
    real = [_step(index, is_system=False) for index in range(5)]
    assert pad_steps(real, is_system=False) == real


def test_padding_beyond_canned_list_repeats_last_step() -> None:
    padded = pad_steps([], is_system=False, minimum=6)

    assert len(padded) == 6
    assert padded[4].id == "user-fallback-4-5"
    assert padded[5].title == padded[3].title
