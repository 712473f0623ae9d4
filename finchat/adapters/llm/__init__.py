"""AI provider adapter layer - abstracts over OpenAI-compatible providers."""

from finchat.adapters.llm.base import AbstractChatClient, AbstractSpeechClient, ChatTurn
from finchat.adapters.llm.factory import create_chat_client, create_speech_client
from finchat.adapters.llm.openai_client import OpenAIChatClient, OpenAISpeechClient

__all__ = [
    "AbstractChatClient",
    "AbstractSpeechClient",
    "ChatTurn",
    "OpenAIChatClient",
    "OpenAISpeechClient",
    "create_chat_client",
    "create_speech_client",
]
