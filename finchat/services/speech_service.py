"""Speech synthesis service."""

import logging
from typing import Callable

from finchat.adapters.llm.base import AbstractSpeechClient
from finchat.adapters.llm.factory import create_speech_client
from finchat.core.config import settings
from finchat.core.errors import LLMAppError, ValidationAppError

logger = logging.getLogger(__name__)


class SpeechService:
    """Turn assistant replies into MP3 audio."""

    def __init__(
        self,
        client: AbstractSpeechClient | None = None,
        *,
        client_factory: Callable[[], AbstractSpeechClient] = create_speech_client,
    ) -> None:
        self._client = client
        self._client_factory = client_factory

    @property
    def client(self) -> AbstractSpeechClient:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    @property
    def model(self) -> str:
        return self.client.model

    async def synthesize(self, text: str, voice: str = "nova", speed: float = 1.0) -> bytes:
        """Render ``text`` as audio.

        Raises:
            ValidationAppError: If the text is empty or too long.
            LLMAppError: If TTS is not configured or the provider call fails.
        """
        if not text or not text.strip():
            raise ValidationAppError(code="empty_text", message="Text cannot be empty")
        if len(text) > settings.app.max_tts_chars:
            raise ValidationAppError(
                code="text_too_long",
                message=f"Text is too long. Please keep text under {settings.app.max_tts_chars:,} characters.",
                details={"max_chars": settings.app.max_tts_chars},
            )

        client = self.client
        try:
            return await client.synthesize(text, voice=voice, speed=speed)
        except RuntimeError as exc:
            logger.error("tts.provider_failed", extra={"model": client.model, "error_msg": str(exc)})
            raise LLMAppError(
                code="tts_generation_failed",
                message="Failed to generate TTS audio. Please try again.",
                details={"model": client.model},
            ) from exc
