"""Fallback client used whenever no real provider can be built."""

import logging

from .base import LLMClient

logger = logging.getLogger(__name__)

NOOP_RESPONSE = (
    "I'm a chat storage service. LLM integration is not currently configured. "
    "You can still store and retrieve chat messages using the API endpoints."
)


class NoOpLLMClient(LLMClient):
    """Never available, never fails, never touches the network."""

    def get_chat_completion(self, text: str, *, timeout: float | None = None) -> str:
        logger.warning("LLM integration is not configured; returning placeholder.")
        return NOOP_RESPONSE

    def is_available(self) -> bool:
        return False
