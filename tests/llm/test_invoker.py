"""Tests for the single-attempt invocation policy."""

from __future__ import annotations

import pytest

from proanalyze.config import AnalysisConfig
from proanalyze.errors import AuthenticationError, InvalidResponseError, TransportError
from proanalyze.llm import ResilientInvoker
from proanalyze.prompting import PromptBuilder
from tests._fixtures.doubles import RecordingSleeper, ScriptedCompleter, make_file, throttled

LONG_TEXT = "A response comfortably longer than the fifty character quality floor."


def _request():
    return PromptBuilder(max_tokens=64).build_analysis_request([make_file("a.py")])


@pytest.mark.asyncio
async def test_successful_attempt_returns_text_without_sleeping(
    config: AnalysisConfig, sleeper: RecordingSleeper
) -> None:
    completer = ScriptedCompleter([LONG_TEXT])
    invoker = ResilientInvoker(completer, config, sleep=sleeper)

    assert await invoker.invoke(_request(), 1) == LONG_TEXT
    assert sleeper.delays == []
    assert completer.calls[0]["max_tokens"] == 64
    assert invoker.last_failure is None


@pytest.mark.asyncio
@pytest.mark.parametrize(("attempt", "expected"), [(1, 0.1), (2, 0.2), (3, 0.4)])
async def test_throttling_sleeps_with_exponential_backoff(
    config: AnalysisConfig, sleeper: RecordingSleeper, attempt: int, expected: float
) -> None:
    invoker = ResilientInvoker(ScriptedCompleter([throttled(503)]), config, sleep=sleeper)

    assert await invoker.invoke(_request(), attempt) is None
    assert sleeper.delays == [pytest.approx(expected)]
    assert invoker.last_failure == "throttled"


@pytest.mark.asyncio
async def test_short_responses_are_rejected(config: AnalysisConfig, sleeper: RecordingSleeper) -> None:
    invoker = ResilientInvoker(ScriptedCompleter(["too short"]), config, sleep=sleeper)

    assert await invoker.invoke(_request(), 1) is None
    assert invoker.last_failure == "invalid"
    assert sleeper.delays == []


@pytest.mark.asyncio
async def test_invalid_response_shape_is_retryable(config: AnalysisConfig, sleeper: RecordingSleeper) -> None:
    completer = ScriptedCompleter([InvalidResponseError("no content")])
    invoker = ResilientInvoker(completer, config, sleep=sleeper)

    assert await invoker.invoke(_request(), 2) is None
    assert invoker.last_failure == "invalid"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [AuthenticationError("bad key"), TransportError("API request failed with status 500", status_code=500)],
)
async def test_terminal_errors_propagate(config: AnalysisConfig, sleeper: RecordingSleeper, error) -> None:
    invoker = ResilientInvoker(ScriptedCompleter([error]), config, sleep=sleeper)

    with pytest.raises(type(error)):
        await invoker.invoke(_request(), 1)
    assert sleeper.delays == []


def test_default_backoff_schedule_doubles_from_two_seconds() -> None:
    config = AnalysisConfig()
    assert [config.backoff_seconds(attempt) for attempt in (1, 2, 3)] == [2.0, 4.0, 8.0]
