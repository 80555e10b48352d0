"""Single-attempt invocation policy: backoff on throttling, quality floor."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, Protocol, Sequence

from ..config import AnalysisConfig
from ..errors import InvalidResponseError, ThrottledError
from ..logging import get_logger
from ..prompting.builder import PromptMessage, PromptRequest

Sleeper = Callable[[float], Awaitable[None]]


class Completer(Protocol):
    """Anything that can turn chat messages into generated text."""

    async def complete(
        self,
        messages: Sequence[PromptMessage],
        *,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Return the generated text or raise a pipeline error."""


class ResilientInvoker:
    """Runs one attempt and reports "try again" as ``None``.

    Authentication and transport errors propagate untouched. Throttling sleeps
    ``base_delay_ms * 2 ** (attempt - 1)`` before returning ``None``; invalid or
    too-short responses return ``None`` straight away. The caller owns the loop.
    """

    def __init__(
        self,
        client: Completer,
        config: AnalysisConfig,
        *,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self.client = client
        self.config = config
        self._sleep = sleep
        self.logger = get_logger("invoker")
        self.last_failure: Optional[str] = None

    async def invoke(self, request: PromptRequest, attempt: int) -> Optional[str]:
        self.last_failure = None
        self.logger.info("Requesting %s completion (attempt %d)", request.purpose, attempt)
        try:
            text = await self.client.complete(request.messages, max_tokens=request.max_tokens)
        except ThrottledError as exc:
            delay = self.config.backoff_seconds(attempt)
            self.logger.warning(
                "Rate limit or service unavailable (%d), waiting %.0fms", exc.status_code, delay * 1000
            )
            self.last_failure = "throttled"
            await self._sleep(delay)
            return None
        except InvalidResponseError as exc:
            self.logger.warning("Invalid response format: %s", exc)
            self.last_failure = "invalid"
            return None

        if len(text.strip()) < self.config.min_response_chars:
            self.logger.warning(
                "Response too short (%d chars, need %d), retrying",
                len(text.strip()),
                self.config.min_response_chars,
            )
            self.last_failure = "invalid"
            return None

        self.logger.debug("Received %d characters for %s", len(text), request.purpose)
        return text


__all__ = ["Completer", "ResilientInvoker", "Sleeper"]
