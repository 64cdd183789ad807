"""Pydantic models for the generation layer."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from google.genai import types
from pydantic import BaseModel, ConfigDict, Field


class ChatRole(str, Enum):
    """Speaker of a conversation turn, as named by the Gemini API."""

    USER = "user"
    MODEL = "model"


class ChatTurn(BaseModel):
    """One message in an alternating user/model conversation."""

    model_config = ConfigDict(frozen=True)

    role: ChatRole = Field(..., description="Who produced the turn: 'user' or 'model'")
    text: str = Field(..., description="Plain text of the turn")

    def to_content(self) -> types.Content:
        """Convert to the Gemini SDK's Content type."""
        return types.Content(role=self.role.value, parts=[types.Part(text=self.text)])


class GenerationResult(BaseModel):
    """Plain text returned by Gemini for the final user turn.

    The text is not validated in any way; reviewing the drafted source is
    left to the user.
    """

    text: str = Field(
        ...,
        description="The generated rule source as returned by the model",
    )
    generation_metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Metadata: model, duration_ms, token counts",
    )
    input_tokens: Optional[int] = Field(
        default=None,
        description="Prompt token count reported by the API, if any",
    )
    output_tokens: Optional[int] = Field(
        default=None,
        description="Candidate token count reported by the API, if any",
    )


def is_alternating(conversation: list[ChatTurn]) -> bool:
    """Check that turns start with the user and never repeat a role back to back."""
    if not conversation or conversation[0].role is not ChatRole.USER:
        return False
    return all(prev.role is not turn.role for prev, turn in zip(conversation, conversation[1:]))
