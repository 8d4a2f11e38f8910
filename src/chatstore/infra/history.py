"""Chat session and message storage.

``ChatHistoryStore`` is the contract the chat endpoints rely on; the
in-memory implementation keeps the service runnable without a database.
Reads return messages oldest-first, which is the order the integration
service expects for conversation context.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from chatstore.core.llm.models import ConversationTurn, MessageSender

logger = logging.getLogger(__name__)


class SessionNotFound(Exception):
    """Raised when a session does not exist or belongs to another user."""

    def __init__(self, session_id: UUID) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


@dataclass(frozen=True)
class ChatSession:
    id: UUID
    user_id: str
    title: str
    created_at: datetime


@dataclass(frozen=True)
class StoredMessage:
    id: UUID
    session_id: UUID
    sender: MessageSender
    content: str
    created_at: datetime

    def to_turn(self) -> ConversationTurn:
        return ConversationTurn(
            sender=self.sender, content=self.content, timestamp=self.created_at
        )


class ChatHistoryStore(ABC):
    """Interface for session/message persistence."""

    @abstractmethod
    def create_session(self, user_id: str, title: str) -> ChatSession:
        """Create an empty session owned by *user_id*."""

    @abstractmethod
    def get_session(self, session_id: UUID, user_id: str) -> ChatSession:
        """Return the session.

        Raises:
            SessionNotFound: unknown session or not owned by *user_id*.
        """

    @abstractmethod
    def add_message(
        self,
        session_id: UUID,
        user_id: str,
        sender: MessageSender,
        content: str,
    ) -> StoredMessage:
        """Append a message.

        Raises:
            SessionNotFound: unknown session or not owned by *user_id*.
        """

    @abstractmethod
    def get_session_messages(
        self,
        session_id: UUID,
        user_id: str,
        limit: int | None = None,
    ) -> list[StoredMessage]:
        """Return the newest *limit* messages (all when ``None``), oldest first.

        Raises:
            SessionNotFound: unknown session or not owned by *user_id*.
        """


@dataclass
class _SessionRecord:
    session: ChatSession
    messages: list[StoredMessage] = field(default_factory=list)


class InMemoryChatHistoryStore(ChatHistoryStore):
    """Process-local store guarded by a single lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sessions: dict[UUID, _SessionRecord] = {}

    def create_session(self, user_id: str, title: str) -> ChatSession:
        session = ChatSession(
            id=uuid4(),
            user_id=user_id,
            title=title,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._sessions[session.id] = _SessionRecord(session=session)
        logger.debug("Created session %s for user %s", session.id, user_id)
        return session

    def get_session(self, session_id: UUID, user_id: str) -> ChatSession:
        with self._lock:
            return self._owned(session_id, user_id).session

    def add_message(
        self,
        session_id: UUID,
        user_id: str,
        sender: MessageSender,
        content: str,
    ) -> StoredMessage:
        with self._lock:
            record = self._owned(session_id, user_id)
            message = StoredMessage(
                id=uuid4(),
                session_id=session_id,
                sender=sender,
                content=content,
                created_at=datetime.now(timezone.utc),
            )
            record.messages.append(message)
        return message

    def get_session_messages(
        self,
        session_id: UUID,
        user_id: str,
        limit: int | None = None,
    ) -> list[StoredMessage]:
        with self._lock:
            messages = list(self._owned(session_id, user_id).messages)
        if limit is not None:
            messages = messages[-limit:] if limit > 0 else []
        return messages

    def _owned(self, session_id: UUID, user_id: str) -> _SessionRecord:
        record = self._sessions.get(session_id)
        if record is None or record.session.user_id != user_id:
            raise SessionNotFound(session_id)
        return record
