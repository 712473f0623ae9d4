from abc import ABC, abstractmethod
from typing import Literal, TypedDict


class ChatTurn(TypedDict):
	role: Literal["system", "user", "assistant"]
	content: str


class AbstractChatClient(ABC):
	"""Interface for chat-completion providers."""

	model: str
	provider: str

	@abstractmethod
	async def complete(self, messages: list[ChatTurn], *, max_tokens: int | None = None) -> str | None:
		"""Run a chat completion.

		Args:
			messages: Full conversation, system prompt first.
			max_tokens: Optional cap on generated tokens.

		Returns:
			str | None: Assistant reply text, or None when the provider returned no content.

		Raises:
			RuntimeError: If the provider call fails.
		"""
		...


class AbstractSpeechClient(ABC):
	"""Interface for text-to-speech providers."""

	model: str

	@abstractmethod
	async def synthesize(self, text: str, *, voice: str, speed: float) -> bytes:
		"""Render text as MP3 audio.

		Raises:
			RuntimeError: If the provider call fails.
		"""
		...
