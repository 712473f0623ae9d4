"""OpenAI-compatible client adapters (OpenAI, Groq, custom endpoints)."""

from typing import Any

from openai import AsyncOpenAI

from finchat.adapters.llm.base import AbstractChatClient, AbstractSpeechClient, ChatTurn


class OpenAIChatClient(AbstractChatClient):
    """Chat completions over any OpenAI-compatible API.

    Groq exposes the same wire protocol, so it is served by this client with
    a different ``base_url``.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        provider: str = "openai",
        base_url: str | None = None,
        timeout_seconds: float = 45.0,
    ) -> None:
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model
        self.provider = provider

    async def complete(self, messages: list[ChatTurn], *, max_tokens: int | None = None) -> str | None:
        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
        }
        if max_tokens is not None:
            request_params["max_completion_tokens"] = max_tokens

        try:
            response = await self.client.chat.completions.create(**request_params)
        except Exception as exc:
            raise RuntimeError(f"{self.provider} API error: {str(exc)}") from exc

        if not response.choices:
            return None
        return response.choices[0].message.content


class OpenAISpeechClient(AbstractSpeechClient):
    """Text-to-speech via the OpenAI audio API."""

    def __init__(
        self,
        api_key: str,
        model: str = "tts-1",
        *,
        base_url: str | None = None,
        timeout_seconds: float = 45.0,
    ) -> None:
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model

    async def synthesize(self, text: str, *, voice: str, speed: float) -> bytes:
        try:
            response = await self.client.audio.speech.create(
                model=self.model,
                voice=voice,
                input=text,
                speed=speed,
                response_format="mp3",
            )
        except Exception as exc:
            raise RuntimeError(f"OpenAI TTS API error: {str(exc)}") from exc

        return response.content
