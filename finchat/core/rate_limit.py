"""Rate limiting dependency for the chat route.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: routes depend on a dependency function only.
- Owned state: the limiter lives on ``app.state`` (built by the app factory),
  so each app instance, and each test, has its own windows.
- Denial is an ordinary outcome: the limiter returns a decision and this
  module turns a denial into HTTP 429.

Client identification:
- The request source address, or the first X-Forwarded-For hop when
  ``APP_RATE_LIMIT_TRUST_FORWARDED_FOR`` is enabled.
- Requests with no discoverable address share the ``"unknown"`` bucket.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import Request

from finchat.adapters.rate_limit.base import AbstractRateLimiter
from finchat.adapters.rate_limit.in_memory import InMemoryRollingWindowRateLimiter
from finchat.core.config import AppSettings, settings
from finchat.core.errors import RateLimitExceededError
from finchat.core.logging import hash_identifier

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT_ID = "unknown"


def build_chat_rate_limiter(app_settings: AppSettings | None = None) -> InMemoryRollingWindowRateLimiter:
    """Construct the chat limiter from configuration."""

    cfg = app_settings or settings.app
    return InMemoryRollingWindowRateLimiter(
        limit=cfg.rate_limit_requests,
        window_seconds=cfg.rate_limit_window_seconds,
    )


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter owned by the running application."""

    return request.app.state.chat_rate_limiter


def get_client_id(request: Request) -> str:
    """Derive the rate limit key for the current request.

    Args:
        request: FastAPI request.

    Returns:
        str: Client address, or ``"unknown"`` when none is available.
    """

    if settings.app.rate_limit_trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT_ID


def format_retry_time(reset_at: float) -> str:
    """Render a window reset timestamp as a human-readable clock time."""

    return datetime.fromtimestamp(reset_at, tz=timezone.utc).strftime("%H:%M:%S UTC")


async def enforce_chat_rate_limit(request: Request) -> None:
    """FastAPI dependency gating the chat endpoint.

    Consumes one admission from the caller's window. When the window is
    exhausted, raises HTTP 429 before the AI provider is contacted.

    Args:
        request: FastAPI request.

    Raises:
        RateLimitExceededError: rendered as HTTP 429 by the exception handlers.
    """

    if not settings.app.rate_limit_enabled:
        return

    limiter = get_rate_limiter(request)
    client_id = get_client_id(request)
    decision = limiter.check_limit(client_id)

    if decision.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "client_hash": hash_identifier(client_id),
                "limit": decision.limit,
                "remaining": decision.remaining,
            },
        )
        return

    retry_after = decision.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "client_hash": hash_identifier(client_id),
            "limit": decision.limit,
            "retry_after_s": retry_after,
        },
    )

    headers: dict[str, str] = {}
    if settings.app.rate_limit_include_headers:
        headers["Retry-After"] = str(retry_after)
        headers["X-RateLimit-Limit"] = str(decision.limit)
        headers["X-RateLimit-Remaining"] = str(decision.remaining)
        headers["X-RateLimit-Reset"] = str(int(decision.reset_at))

    raise RateLimitExceededError(
        message=f"Rate limit exceeded. Please try again after {format_retry_time(decision.reset_at)}.",
        retry_after_ms=int(decision.reset_at * 1000),
        headers=headers,
    )
