"""Conversation turns and provider wire models.

``ConversationTurn`` is what callers hand to the integration service.
The ``*Request`` / ``*Response`` models are the JSON shapes exchanged
with each provider; they are built and discarded per call.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------

ROLE_SYSTEM = "system"
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"

Role = Literal["system", "user", "assistant"]


class MessageSender(str, Enum):
    """Who authored a stored message."""

    USER = "user"
    ASSISTANT = "assistant"

    @property
    def role(self) -> str:
        """Chat-completion role for this sender."""
        return ROLE_USER if self is MessageSender.USER else ROLE_ASSISTANT


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationTurn(BaseModel):
    """One stored utterance, as passed to the LLM as context."""

    model_config = ConfigDict(frozen=True)

    sender: MessageSender = Field(description="Message author")
    content: str = Field(description="Message text")
    timestamp: datetime = Field(
        default_factory=_utcnow, description="When the message was stored"
    )


# ---------------------------------------------------------------------------
# Wire models (shared)
# ---------------------------------------------------------------------------


class ChatMessage(BaseModel):
    """A role-tagged message in a chat-completion payload."""

    role: Role
    content: str


class ReplyMessage(BaseModel):
    """Message object as returned by providers; content may be absent."""

    role: str | None = None
    content: str | None = None


# ---------------------------------------------------------------------------
# Groq (OpenAI-compatible chat completions)
# ---------------------------------------------------------------------------


class GroqRequest(BaseModel):
    model: str
    messages: list[ChatMessage]
    temperature: float
    max_tokens: int
    top_p: float
    stream: bool


class GroqChoice(BaseModel):
    index: int = 0
    message: ReplyMessage | None = None
    finish_reason: str | None = None


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class GroqResponse(BaseModel):
    id: str | None = None
    model: str | None = None
    choices: list[GroqChoice] = Field(default_factory=list)
    usage: Usage | None = None


# ---------------------------------------------------------------------------
# Ollama (/api/chat)
# ---------------------------------------------------------------------------


class OllamaRequest(BaseModel):
    model: str
    messages: list[ChatMessage]
    temperature: float
    max_tokens: int
    top_p: float
    stream: bool = False


class OllamaResponse(BaseModel):
    model: str | None = None
    message: ReplyMessage | None = None
    done: bool | None = None
