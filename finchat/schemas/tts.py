"""Pydantic schemas for speech synthesis."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

Voice = Literal["alloy", "echo", "fable", "onyx", "nova", "shimmer"]


class TTSRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=4096, description="Text to speak.")
    voice: Voice = Field(default="nova", description="Provider voice preset.")
    speed: float = Field(default=1.0, ge=0.25, le=4.0, description="Playback speed multiplier.")

    @field_validator("text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Text cannot be empty")
        return value
