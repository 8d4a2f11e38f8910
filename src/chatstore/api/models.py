"""Pydantic models for the chat API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from chatstore.core.llm.models import MessageSender
from chatstore.infra.history import ChatSession, StoredMessage

# Upper bound enforced by the model; ChatConfig.max_message_length may be lower.
CHAT_MESSAGE_MAX_LENGTH = 16384
USER_ID_MAX_LENGTH = 255
TITLE_MAX_LENGTH = 255


class StartChatRequest(BaseModel):
    """Request body for starting a new chat session."""

    user_id: str = Field(
        description="Owner of the new session",
        min_length=1,
        max_length=USER_ID_MAX_LENGTH,
    )
    message: str = Field(
        description="First user message",
        min_length=1,
        max_length=CHAT_MESSAGE_MAX_LENGTH,
    )
    title: str | None = Field(
        default=None, description="Session title", max_length=TITLE_MAX_LENGTH
    )


class SendMessageRequest(BaseModel):
    """Request body for sending a message within an existing session."""

    user_id: str = Field(
        description="Owner of the session",
        min_length=1,
        max_length=USER_ID_MAX_LENGTH,
    )
    message: str = Field(
        description="User message",
        min_length=1,
        max_length=CHAT_MESSAGE_MAX_LENGTH,
    )


class MessageResponse(BaseModel):
    id: UUID
    session_id: UUID
    sender: MessageSender
    content: str
    created_at: datetime

    @classmethod
    def from_stored(cls, message: StoredMessage) -> "MessageResponse":
        return cls(
            id=message.id,
            session_id=message.session_id,
            sender=message.sender,
            content=message.content,
            created_at=message.created_at,
        )


class SessionResponse(BaseModel):
    id: UUID
    user_id: str
    title: str
    created_at: datetime

    @classmethod
    def from_session(cls, session: ChatSession) -> "SessionResponse":
        return cls(
            id=session.id,
            user_id=session.user_id,
            title=session.title,
            created_at=session.created_at,
        )


class LLMStatusResponse(BaseModel):
    """LLM integration status."""

    status: str = Field(description="ACTIVE, UNAVAILABLE or DISABLED")
    available: bool = Field(description="Whether replies come from an LLM")
