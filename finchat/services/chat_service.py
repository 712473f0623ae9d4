"""Chat service orchestrating prompt construction and the provider call.

The service owns:
- The system prompt framing the UK personal-finance assistant
- Message assembly (system prompt, prior turns, new question)
- Lazy provider selection, so the API boots without AI credentials
- Mapping provider failures onto LLMAppError
"""

import logging
from typing import Callable

from finchat.adapters.llm.base import AbstractChatClient, ChatTurn
from finchat.adapters.llm.factory import create_chat_client
from finchat.core.config import settings
from finchat.core.errors import LLMAppError, ValidationAppError
from finchat.schemas.chat import ChatMessage

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I apologize, but I couldn't generate a response. Please try again."

SYSTEM_PROMPT = """You are a knowledgeable UK financial advisor AI assistant specializing in UK tax laws, HMRC regulations, UK accounting standards, and UK personal finance. Your role is to:

1. Provide accurate, helpful information about UK tax regulations, HMRC compliance, UK accounting principles, and UK financial planning
2. Reference UK-specific tax allowances, bands, National Insurance, VAT, Corporation Tax, Income Tax, Capital Gains Tax, and Inheritance Tax
3. Discuss UK pension schemes (including ISAs, SIPPs, workplace pensions), UK savings accounts, and UK investment vehicles
4. Explain UK financial concepts in clear, accessible language using British terminology
5. Offer general guidance while always recommending users consult UK-qualified professionals (chartered accountants, tax advisors, IFAs) for specific advice
6. Stay current with UK financial best practices, HMRC regulations, and UK tax year schedules
7. Be thorough but concise in your explanations

Important: Always provide information specific to the United Kingdom and HMRC regulations. Include appropriate disclaimers that your advice is for informational purposes only and users should consult UK-qualified professionals for their specific situations."""


def build_messages(user_message: str, history: list[ChatMessage] | None = None) -> list[ChatTurn]:
    """Assemble the provider conversation: system prompt, history, question."""
    messages: list[ChatTurn] = [{"role": "system", "content": SYSTEM_PROMPT}]
    for turn in history or []:
        messages.append({"role": turn.role, "content": turn.content})
    messages.append({"role": "user", "content": user_message})
    return messages


class ChatService:
    """Answer finance questions through the configured chat provider.

    Attributes:
        max_message_chars: Upper bound enforced on the user message.
    """

    def __init__(
        self,
        llm: AbstractChatClient | None = None,
        *,
        client_factory: Callable[[], AbstractChatClient] = create_chat_client,
        max_message_chars: int | None = None,
    ) -> None:
        self._llm = llm
        self._client_factory = client_factory
        self.max_message_chars = max_message_chars or settings.app.max_message_chars

    @property
    def llm(self) -> AbstractChatClient:
        """Provider client, created on first use.

        Raises:
            LLMAppError: If no provider is configured.
        """
        if self._llm is None:
            self._llm = self._client_factory()
        return self._llm

    @property
    def model(self) -> str:
        return self.llm.model

    def _validate(self, user_message: str) -> None:
        if not user_message or not user_message.strip():
            raise ValidationAppError(code="empty_message", message="Message cannot be empty")
        if len(user_message) > self.max_message_chars:
            raise ValidationAppError(
                code="message_too_long",
                message=f"Message is too long. Please keep messages under {self.max_message_chars:,} characters.",
                details={"max_chars": self.max_message_chars},
            )

    async def reply(self, user_message: str, history: list[ChatMessage] | None = None) -> str:
        """Generate the assistant's answer.

        Args:
            user_message: The new question.
            history: Earlier turns, oldest first.

        Returns:
            Assistant reply; a fixed apology when the provider returns nothing.

        Raises:
            ValidationAppError: If the message is empty or too long.
            LLMAppError: If the provider is not configured or the call fails.
        """
        self._validate(user_message)
        messages = build_messages(user_message, history)
        client = self.llm

        try:
            content = await client.complete(messages, max_tokens=settings.llm.max_completion_tokens)
        except RuntimeError as exc:
            logger.error(
                "chat.provider_failed",
                extra={"provider": client.provider, "model": client.model, "error_msg": str(exc)},
            )
            raise LLMAppError(
                code="chat_generation_failed",
                message="Failed to generate AI response. Please try again.",
                details={"provider": client.provider, "model": client.model},
            ) from exc

        if not content:
            logger.warning("chat.empty_completion", extra={"model": client.model})
            return FALLBACK_REPLY
        return content
