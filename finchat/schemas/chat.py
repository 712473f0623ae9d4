"""Pydantic schemas for the chat endpoint."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChatMessage(BaseModel):
    """A previous turn of the conversation, supplied by the client."""

    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Incoming chat request.

    ``conversationHistory`` is accepted under its camelCase name (what the web
    client sends) as well as ``conversation_history``.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(
        ...,
        min_length=1,
        max_length=10000,
        description="The user's question.",
    )
    conversation_history: list[ChatMessage] = Field(
        default_factory=list,
        alias="conversationHistory",
        description="Earlier turns, oldest first.",
    )

    @field_validator("message")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message cannot be empty")
        return value


class ChatResponse(BaseModel):
    message: str
    success: bool = True
