"""Chat endpoints: store messages and reply through the LLM integration.

The user's message is always stored before a reply is requested, so a
provider failure can only degrade the reply.  Handlers are plain
``def``: provider calls block, and FastAPI runs them in its threadpool.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from chatstore.core.llm.models import MessageSender

from .deps import ChatConfigDep, HistoryStoreDep, LLMServiceDep
from .exceptions import MessageTooLong
from .models import (
    USER_ID_MAX_LENGTH,
    LLMStatusResponse,
    MessageResponse,
    SendMessageRequest,
    SessionResponse,
    StartChatRequest,
)

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])

UserIdQuery = Annotated[
    str, Query(description="Session owner", min_length=1, max_length=USER_ID_MAX_LENGTH)
]


def _check_length(message: str, limit: int) -> None:
    if len(message) > limit:
        raise MessageTooLong(len(message), limit)


@router.post("/sessions")
def start_new_chat(
    body: StartChatRequest,
    service: LLMServiceDep,
    store: HistoryStoreDep,
    chat_config: ChatConfigDep,
) -> SessionResponse:
    """Create a session, store the first message and its reply."""
    _check_length(body.message, chat_config.max_message_length)
    session = store.create_session(
        body.user_id, body.title or chat_config.default_session_title
    )
    store.add_message(session.id, body.user_id, MessageSender.USER, body.message)

    reply = service.process_message(body.message)
    store.add_message(session.id, body.user_id, MessageSender.ASSISTANT, reply)

    return SessionResponse.from_session(session)


@router.post("/sessions/{session_id}")
def chat_with_session(
    session_id: UUID,
    body: SendMessageRequest,
    service: LLMServiceDep,
    store: HistoryStoreDep,
    chat_config: ChatConfigDep,
) -> MessageResponse:
    """Send a message in an existing session and return the stored reply."""
    _check_length(body.message, chat_config.max_message_length)

    # History is read before the new message is stored so it is not sent twice.
    history = store.get_session_messages(
        session_id, body.user_id, limit=chat_config.max_history_messages
    )
    store.add_message(session_id, body.user_id, MessageSender.USER, body.message)

    reply = service.process_message_with_context(
        body.message, [message.to_turn() for message in history]
    )
    stored = store.add_message(
        session_id, body.user_id, MessageSender.ASSISTANT, reply
    )
    return MessageResponse.from_stored(stored)


@router.get("/sessions/{session_id}")
def get_session(
    session_id: UUID,
    user_id: UserIdQuery,
    store: HistoryStoreDep,
) -> SessionResponse:
    return SessionResponse.from_session(store.get_session(session_id, user_id))


@router.get("/sessions/{session_id}/messages")
def get_session_messages(
    session_id: UUID,
    user_id: UserIdQuery,
    store: HistoryStoreDep,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> list[MessageResponse]:
    """Stored messages, oldest first; *limit* keeps only the newest N."""
    messages = store.get_session_messages(session_id, user_id, limit=limit)
    return [MessageResponse.from_stored(message) for message in messages]


@router.get("/status")
def get_llm_status(service: LLMServiceDep) -> LLMStatusResponse:
    """Report whether replies are generated by an LLM."""
    return LLMStatusResponse(
        status=service.get_status(),
        available=service.is_llm_available(),
    )
