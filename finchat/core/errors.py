"""Domain errors raised by services and adapters.

Each error class carries the HTTP status it maps to, so the global handler in
``exception_handlers`` never needs to know about individual subclasses.
Rate-limit denials are not errors in this sense: the limiter returns a
decision and the HTTP layer answers 429 directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Optional structured context returned under ``error.details``."""

    hint: str
    provider: str
    model: str
    max_chars: int
    errors: list[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base class for failures that are reported to the client.

    Attributes:
        code: Stable, machine-readable error code (``message_too_long``).
        message: Human-readable message safe to show to end users.
        details: Optional structured context.
    """

    status_code: ClassVar[int] = 400

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)


class ValidationAppError(AppError):
    """The request was understood but its content is unacceptable."""

    status_code = 400


class AuthenticationAppError(AppError):
    """Admin credentials missing or wrong."""

    status_code = 403


class LLMAppError(AppError):
    """The AI provider is unconfigured, unreachable or failed."""

    status_code = 500


class RateLimitExceededError(Exception):
    """A client has used up its chat quota for the current window.

    Not an ``AppError``: the body keeps the flat shape the web client reads
    (``error``, ``success``, ``retryAfter``) and the response carries
    rate-limit headers.

    Attributes:
        message: Human-readable message naming the retry time.
        retry_after_ms: Window reset time as epoch milliseconds.
        headers: ``Retry-After`` / ``X-RateLimit-*`` headers, possibly empty.
    """

    def __init__(self, message: str, retry_after_ms: int, headers: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.retry_after_ms = retry_after_ms
        self.headers = headers or {}
