"""HTTP client for the OpenAI-style chat completion service."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ..config import AnalysisConfig
from ..errors import AuthenticationError, InvalidResponseError, ThrottledError, TransportError
from ..logging import get_logger
from ..prompting.builder import PromptMessage

_RETRYABLE_STATUSES = frozenset({429, 503})


@dataclass
class CompletionRequest:
    """Body and transport settings for one chat completion call."""

    endpoint: str
    model: str
    messages: List[Dict[str, str]]
    max_tokens: Optional[int]
    temperature: float
    top_p: float
    api_key: Optional[str]
    timeout: float

    def payload(self) -> Dict[str, object]:
        body: Dict[str, object] = {
            "model": self.model,
            "messages": self.messages,
            "temperature": self.temperature,
            "top_p": self.top_p,
        }
        if self.max_tokens is not None:
            body["max_tokens"] = self.max_tokens
        return body

    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers


class CompletionClient:
    """Sends one request per call and classifies the outcome.

    Raises :class:`AuthenticationError` for 401, :class:`ThrottledError` for
    429/503, :class:`TransportError` for any other HTTP or network failure and
    :class:`InvalidResponseError` when the body has no generated text.
    """

    def __init__(
        self,
        config: AnalysisConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport
        self.logger = get_logger("llm")
        if not config.api_key:
            self.logger.warning("No API key configured; the completion service will likely reject requests")

    async def complete(
        self,
        messages: Sequence[PromptMessage],
        *,
        max_tokens: Optional[int] = None,
    ) -> str:
        request = CompletionRequest(
            endpoint=self.config.model_endpoint,
            model=self.config.model_name,
            messages=[{"role": message.role, "content": message.content} for message in messages],
            max_tokens=max_tokens if max_tokens is not None else self.config.max_tokens,
            temperature=self.config.temperature,
            top_p=self.config.top_p,
            api_key=self.config.api_key,
            timeout=self.config.request_timeout,
        )
        response = await self._post(request)
        return self._extract_content(response)

    async def _post(self, request: CompletionRequest) -> httpx.Response:
        # httpx timeouts apply per read; the attempt as a whole is bounded here.
        try:
            async with asyncio.timeout(request.timeout):
                async with httpx.AsyncClient(
                    timeout=httpx.Timeout(request.timeout),
                    transport=self._transport,
                ) as client:
                    response = await client.post(
                        request.endpoint,
                        json=request.payload(),
                        headers=request.headers(),
                    )
        except (TimeoutError, httpx.TimeoutException) as exc:
            raise TransportError(
                f"Completion request timed out after {request.timeout:.0f}s"
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(f"Completion request failed: {exc}") from exc

        self.logger.debug("Completion service answered with status %d", response.status_code)
        status = response.status_code
        if status == 401:
            raise AuthenticationError(
                "Invalid completion service API key. Please check your configuration."
            )
        if status in _RETRYABLE_STATUSES:
            raise ThrottledError(
                f"Completion service returned {status}: {_error_detail(response)}",
                status_code=status,
            )
        if status >= 400:
            raise TransportError(
                f"API request failed with status {status}: {_error_detail(response)}",
                status_code=status,
            )
        return response

    @staticmethod
    def _extract_content(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError as exc:
            raise InvalidResponseError("Completion service returned invalid JSON") from exc
        content = _content_path(payload)
        if content is None or not content.strip():
            raise InvalidResponseError("Completion service response has no choices[0].message.content")
        return content.strip()


def _content_path(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str):
            return error
        if isinstance(payload.get("message"), str):
            return payload["message"]
    text = response.text.strip()
    return text[:200] if text else response.reason_phrase


__all__ = ["CompletionClient", "CompletionRequest"]
