"""Centralized FastAPI dependency type aliases.

The integration service and the history store are built once in the
application lifespan and kept on ``app.state``; these factories hand
them to routes.  Tests override them via
``app.dependency_overrides[get_xxx] = ...``.
"""

from typing import Annotated

from fastapi import Depends, Request

from chatstore.configs.system import ChatConfig
from chatstore.core.service.integration import LLMIntegrationService
from chatstore.infra.history import ChatHistoryStore


def get_llm_service(request: Request) -> LLMIntegrationService:
    return request.app.state.llm_service


def get_history_store(request: Request) -> ChatHistoryStore:
    return request.app.state.history_store


def get_chat_config(request: Request) -> ChatConfig:
    return request.app.state.config.chat


LLMServiceDep = Annotated[LLMIntegrationService, Depends(get_llm_service)]
HistoryStoreDep = Annotated[ChatHistoryStore, Depends(get_history_store)]
ChatConfigDep = Annotated[ChatConfig, Depends(get_chat_config)]
