"""FastAPI application entry point.

Run with ``uvicorn chatstore.app:app``.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from chatstore.api.chat import router as chat_router
from chatstore.api.exceptions import register_exception_handlers
from chatstore.configs.config import AppConfig, get_app_config
from chatstore.core.llm import build_client
from chatstore.core.service.integration import LLMIntegrationService
from chatstore.core.service.metrics import build_metrics
from chatstore.infra.history import InMemoryChatHistoryStore
from chatstore.infra.logging import setup_logging
from chatstore.infra.telemetry import init_telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the LLM client once and close it on shutdown."""
    config: AppConfig = app.state.config
    client = build_client(config.llm)
    app.state.llm_service = LLMIntegrationService(client)
    app.state.history_store = InMemoryChatHistoryStore()
    logger.info(
        "Chat storage service started (LLM status: %s)",
        app.state.llm_service.get_status(),
    )
    try:
        yield
    finally:
        client.close()
        logger.info("Chat storage service stopped")


def get_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or get_app_config()
    setup_logging(config.logging)

    app = FastAPI(
        title="Chatstore",
        description="Chat history storage with optional LLM replies",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = config

    init_telemetry(app, config.tracing)
    build_metrics(app, config.metrics, config.tracing)
    register_exception_handlers(app)

    app.include_router(chat_router)

    @app.get("/health", include_in_schema=False)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = get_app()
