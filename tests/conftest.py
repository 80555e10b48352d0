from __future__ import annotations

from typing import Awaitable, Callable

import pytest

from proanalyze.config import AnalysisConfig
from tests._fixtures.doubles import RecordingEngine, RecordingSleeper


@pytest.fixture
def config() -> AnalysisConfig:
    """Defaults with a short backoff base so delay assertions stay readable."""
    return AnalysisConfig(api_key="test-key", base_delay_ms=100)


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture
def engine() -> RecordingEngine:
    return RecordingEngine()


@pytest.fixture
def engine_factory(engine: RecordingEngine) -> Callable[[], Awaitable[RecordingEngine]]:
    async def factory() -> RecordingEngine:
        return engine

    return factory
