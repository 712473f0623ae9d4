from __future__ import annotations

from finchat.api.routes.admin import router as admin_router
from finchat.api.routes.chat import router as chat_router
from finchat.api.routes.health import router as health_router
from finchat.api.routes.tts import router as tts_router

__all__ = ["admin_router", "chat_router", "health_router", "tts_router"]
