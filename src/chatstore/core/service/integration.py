"""LLM integration service: the single entry point for reply generation.

Callers store the user's message first, then ask this service for a
reply.  Every public method is total: provider failures are logged and
turned into a placeholder reply so a broken or missing LLM only ever
degrades the reply, never the stored conversation.

Status is recomputed from the injected client on every call; the
service itself holds no mutable state and is safe to share across
request threads.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from chatstore.core.llm.base import LLMClient, SupportsContext
from chatstore.core.llm.models import ConversationTurn
from chatstore.core.llm.noop import NoOpLLMClient
from chatstore.infra.telemetry import (
    ATTR_LLM_CONTEXT_MODE,
    ATTR_LLM_FALLBACK,
    ATTR_LLM_HISTORY_LEN,
    SPAN_LLM_INTEGRATION,
    tracer,
)

from .metrics import LLM_FALLBACK_RESPONSES_TOTAL
from .prompt import build_contextual_prompt

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# User-facing placeholder copy
# ---------------------------------------------------------------------------

UNAVAILABLE_RESPONSE = (
    "This chat storage service is running without LLM integration. "
    "Your message has been stored successfully. "
    "Configure an LLM provider to enable AI responses."
)

ERROR_RESPONSE = (
    "Sorry, I encountered an error generating a response. "
    "Your message has been stored successfully. "
    "Please try again later or check the LLM configuration."
)

# ---------------------------------------------------------------------------
# Status values
# ---------------------------------------------------------------------------

STATUS_DISABLED = "DISABLED - No LLM configured"
STATUS_ACTIVE = "ACTIVE"
STATUS_UNAVAILABLE = "UNAVAILABLE"

_CONTEXT_NATIVE = "native"
_CONTEXT_FLATTENED = "flattened"
_CONTEXT_NONE = "none"


class LLMIntegrationService:
    """Routes messages to the active client and absorbs its failures."""

    def __init__(self, client: LLMClient) -> None:
        self._client = client

    @property
    def client(self) -> LLMClient:
        return self._client

    def process_message(self, user_message: str) -> str:
        """Reply to a single message with no conversation context."""
        with tracer.start_as_current_span(SPAN_LLM_INTEGRATION) as span:
            span.set_attribute(ATTR_LLM_CONTEXT_MODE, _CONTEXT_NONE)
            if not self._client.is_available():
                return self._unavailable(span)
            try:
                return self._client.get_chat_completion(user_message)
            except Exception:
                return self._failed(span)

    def process_message_with_context(
        self,
        user_message: str,
        history: Sequence[ConversationTurn] | None,
    ) -> str:
        """Reply to *user_message* given prior turns, oldest first."""
        history = list(history or ())
        with tracer.start_as_current_span(SPAN_LLM_INTEGRATION) as span:
            span.set_attribute(ATTR_LLM_HISTORY_LEN, len(history))
            if not self._client.is_available():
                return self._unavailable(span)
            try:
                if isinstance(self._client, SupportsContext):
                    span.set_attribute(ATTR_LLM_CONTEXT_MODE, _CONTEXT_NATIVE)
                    return self._client.get_chat_completion_with_context(
                        history, user_message
                    )
                span.set_attribute(ATTR_LLM_CONTEXT_MODE, _CONTEXT_FLATTENED)
                prompt = build_contextual_prompt(user_message, history)
                return self._client.get_chat_completion(prompt)
            except Exception:
                return self._failed(span)

    def is_llm_available(self) -> bool:
        return self._client.is_available()

    def get_status(self) -> str:
        """Three-state classification of the injected client."""
        if isinstance(self._client, NoOpLLMClient):
            return STATUS_DISABLED
        return STATUS_ACTIVE if self._client.is_available() else STATUS_UNAVAILABLE

    # ------------------------------------------------------------------
    # Placeholders
    # ------------------------------------------------------------------

    @staticmethod
    def _unavailable(span) -> str:
        logger.debug("LLM client not available, returning informative response")
        span.set_attribute(ATTR_LLM_FALLBACK, "unavailable")
        LLM_FALLBACK_RESPONSES_TOTAL.labels(reason="unavailable").inc()
        return UNAVAILABLE_RESPONSE

    @staticmethod
    def _failed(span) -> str:
        logger.error(
            "Failed to get LLM response, but message was stored successfully",
            exc_info=True,
        )
        span.set_attribute(ATTR_LLM_FALLBACK, "error")
        LLM_FALLBACK_RESPONSES_TOTAL.labels(reason="error").inc()
        return ERROR_RESPONSE
