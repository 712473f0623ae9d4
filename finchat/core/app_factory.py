"""Application factory for the FastAPI app.

Centralizes app construction (metadata, owned components, middleware,
handlers, routers) so tests can build independent app instances.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from finchat.adapters.analytics.base import AbstractAnalyticsStore
from finchat.adapters.analytics.in_memory import InMemoryAnalyticsStore
from finchat.adapters.rate_limit.base import AbstractRateLimiter
from finchat.adapters.rate_limit.reclaimer import RateLimitReclaimer
from finchat.api.routes import admin_router, chat_router, health_router, tts_router
from finchat.core.config import settings
from finchat.core.exception_handlers import setup_exception_handlers
from finchat.core.logging import configure_logging
from finchat.core.middleware import request_id_middleware
from finchat.core.rate_limit import build_chat_rate_limiter
from finchat.services.analytics_service import AnalyticsService
from finchat.services.chat_service import ChatService
from finchat.services.speech_service import SpeechService
from finchat.services.usage_tracking import UsageTracker

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the rate limit reclaimer for the lifetime of the server."""
    reclaimer: RateLimitReclaimer = app.state.rate_limit_reclaimer
    await reclaimer.start()
    logger.info("app.started", extra={"app_env": settings.app_env})
    try:
        yield
    finally:
        await reclaimer.stop()
        logger.info("app.stopped")


def create_app(
    *,
    rate_limiter: AbstractRateLimiter | None = None,
    analytics_store: AbstractAnalyticsStore | None = None,
    chat_service: ChatService | None = None,
    speech_service: SpeechService | None = None,
    configure_logs: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Every stateful component is constructed here and owned by the returned
    app; pass one in to replace the default.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    if configure_logs:
        configure_logging(settings.log)

    app = FastAPI(
        title="FinChat API",
        description=(
            "UK personal-finance assistant backend: forwards chat and "
            "text-to-speech requests to AI providers, enforces a per-client "
            "chat quota and records usage for the analytics dashboard."
        ),
        version="0.1.0",
        debug=settings.app.debug,
        lifespan=lifespan,
    )

    limiter = rate_limiter if rate_limiter is not None else build_chat_rate_limiter(settings.app)
    store = analytics_store if analytics_store is not None else InMemoryAnalyticsStore()

    app.state.chat_rate_limiter = limiter
    app.state.rate_limit_reclaimer = RateLimitReclaimer(
        limiter,
        interval_seconds=settings.app.rate_limit_cleanup_interval_seconds,
    )
    app.state.analytics_store = store
    app.state.usage_tracker = UsageTracker(store)
    app.state.analytics_service = AnalyticsService(store)
    app.state.chat_service = chat_service if chat_service is not None else ChatService()
    app.state.speech_service = speech_service if speech_service is not None else SpeechService()

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(chat_router, prefix="/api")
    app.include_router(tts_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")
    app.include_router(health_router)

    return app
