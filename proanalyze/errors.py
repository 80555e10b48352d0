"""Exception types raised by the analysis pipeline."""

from __future__ import annotations


class ProAnalyzeError(RuntimeError):
    """Base class for pipeline failures."""


class AuthenticationError(ProAnalyzeError):
    """The completion service rejected the configured credentials (HTTP 401)."""


class ThrottledError(ProAnalyzeError):
    """The completion service is rate limiting or temporarily unavailable."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class LowQualityResponse(ProAnalyzeError):
    """A response arrived but is too short or structurally incomplete."""


class InvalidResponseError(LowQualityResponse):
    """The response body lacks ``choices[0].message.content``."""


class TransportError(ProAnalyzeError):
    """Network failure, timeout, or an unexpected HTTP status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExtractionParseError(ProAnalyzeError):
    """The workflow step response did not contain a parseable step array."""


class AnalysisFailedError(ProAnalyzeError):
    """Raised once the retry budget is exhausted without a usable analysis."""


__all__ = [
    "AnalysisFailedError",
    "AuthenticationError",
    "ExtractionParseError",
    "InvalidResponseError",
    "LowQualityResponse",
    "ProAnalyzeError",
    "ThrottledError",
    "TransportError",
]
