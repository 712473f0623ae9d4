"""Factory functions for creating provider clients from configuration."""

import logging

from finchat.adapters.llm.base import AbstractChatClient, AbstractSpeechClient
from finchat.adapters.llm.openai_client import OpenAIChatClient, OpenAISpeechClient
from finchat.core.config import LLMSettings, settings
from finchat.core.errors import LLMAppError

logger = logging.getLogger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
GROQ_DEFAULT_MODEL = "llama-3.3-70b-versatile"
OPENAI_DEFAULT_MODEL = "gpt-4o"


def create_chat_client(llm_settings: LLMSettings | None = None) -> AbstractChatClient:
    """Instantiate the chat client for the highest-priority configured provider.

    Priority: Groq > OpenAI > custom OpenAI-compatible endpoint.

    Returns:
        AbstractChatClient: Configured chat client.

    Raises:
        LLMAppError: If no provider is configured.
    """
    cfg = llm_settings or settings.llm

    if cfg.groq_api_key:
        logger.info("llm.chat_provider_selected", extra={"provider": "groq"})
        return OpenAIChatClient(
            api_key=cfg.groq_api_key,
            model=cfg.chat_model or GROQ_DEFAULT_MODEL,
            provider="groq",
            base_url=GROQ_BASE_URL,
            timeout_seconds=cfg.timeout_seconds,
        )

    if cfg.openai_api_key:
        logger.info("llm.chat_provider_selected", extra={"provider": "openai"})
        return OpenAIChatClient(
            api_key=cfg.openai_api_key,
            model=cfg.chat_model or OPENAI_DEFAULT_MODEL,
            provider="openai",
            timeout_seconds=cfg.timeout_seconds,
        )

    if cfg.base_url and cfg.api_key:
        logger.info("llm.chat_provider_selected", extra={"provider": "compatible"})
        return OpenAIChatClient(
            api_key=cfg.api_key,
            model=cfg.chat_model or OPENAI_DEFAULT_MODEL,
            provider="compatible",
            base_url=cfg.base_url,
            timeout_seconds=cfg.timeout_seconds,
        )

    raise LLMAppError(
        code="llm_not_configured",
        message=(
            "AI service is not configured. Set LLM_GROQ_API_KEY (Groq), "
            "LLM_OPENAI_API_KEY (OpenAI), or LLM_BASE_URL and LLM_API_KEY "
            "(OpenAI-compatible endpoint)."
        ),
    )


def create_speech_client(llm_settings: LLMSettings | None = None) -> AbstractSpeechClient:
    """Instantiate the speech client.

    Groq has no speech endpoint, so only OpenAI or the custom endpoint apply.

    Raises:
        LLMAppError: If neither is configured.
    """
    cfg = llm_settings or settings.llm

    if cfg.openai_api_key:
        return OpenAISpeechClient(
            api_key=cfg.openai_api_key,
            model=cfg.tts_model,
            timeout_seconds=cfg.timeout_seconds,
        )

    if cfg.base_url and cfg.api_key:
        return OpenAISpeechClient(
            api_key=cfg.api_key,
            model=cfg.tts_model,
            base_url=cfg.base_url,
            timeout_seconds=cfg.timeout_seconds,
        )

    raise LLMAppError(
        code="tts_not_configured",
        message=(
            "Speech synthesis is not configured. Set LLM_OPENAI_API_KEY, or "
            "LLM_BASE_URL and LLM_API_KEY. Groq does not support TTS."
        ),
    )
