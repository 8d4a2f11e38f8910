"""Global exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from chatstore.infra.history import SessionNotFound


class MessageTooLong(Exception):
    """Raised when a message exceeds ``ChatConfig.max_message_length``."""

    def __init__(self, length: int, limit: int) -> None:
        super().__init__(f"Message length {length} exceeds the limit of {limit}")


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers on ``app``."""

    @app.exception_handler(SessionNotFound)
    async def handle_session_not_found(
        request: Request, exc: SessionNotFound
    ) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={"detail": str(exc), "code": "SESSION_NOT_FOUND"},
        )

    @app.exception_handler(MessageTooLong)
    async def handle_message_too_long(
        request: Request, exc: MessageTooLong
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "code": "MESSAGE_TOO_LONG"},
        )
