"""Groq client (OpenAI-compatible ``chat/completions``)."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx

from chatstore.configs.system import COMPLETIONS_PATH, LLMConfig, ProviderKind

from .exceptions import InvalidResponseFormat
from .http import HttpLLMClient
from .models import (
    ROLE_SYSTEM,
    ROLE_USER,
    ChatMessage,
    ConversationTurn,
    GroqRequest,
    GroqResponse,
)

logger = logging.getLogger(__name__)

CONTEXT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Respond based on the conversation context."
)


def build_context_messages(
    history: Sequence[ConversationTurn],
    current_text: str,
) -> list[ChatMessage]:
    """System turn, then *history* in the given order, then *current_text*."""
    messages = [ChatMessage(role=ROLE_SYSTEM, content=CONTEXT_SYSTEM_PROMPT)]
    messages.extend(
        ChatMessage(role=turn.sender.role, content=turn.content) for turn in history
    )
    messages.append(ChatMessage(role=ROLE_USER, content=current_text))
    return messages


class GroqClient(HttpLLMClient):
    """Hosted Groq API client; supports native multi-turn context."""

    provider = ProviderKind.GROQ
    endpoint = COMPLETIONS_PATH

    def __init__(self, config: LLMConfig, http_client: httpx.Client) -> None:
        super().__init__(config, http_client)
        if config.stream:
            logger.warning(
                "Groq streaming is enabled but streamed replies are not parsed; "
                "completions will fail until llm.stream is false."
            )

    def get_chat_completion(self, text: str, *, timeout: float | None = None) -> str:
        messages = [ChatMessage(role=ROLE_USER, content=text)]
        return self._complete(messages, timeout)

    def get_chat_completion_with_context(
        self,
        history: Sequence[ConversationTurn],
        current_text: str,
        *,
        timeout: float | None = None,
    ) -> str:
        logger.debug("Contextual Groq request with %d history turn(s)", len(history))
        return self._complete(build_context_messages(history, current_text), timeout)

    def _complete(self, messages: list[ChatMessage], timeout: float | None) -> str:
        request = GroqRequest(
            model=self._config.model,
            messages=messages,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
            top_p=self._config.top_p,
            stream=self._config.stream,
        )
        body = self._post(request, len(messages), timeout)
        return self._extract_content(self._parse(GroqResponse, body))

    def _extract_content(self, response: GroqResponse) -> str:
        if not response.choices:
            raise InvalidResponseFormat(
                "Invalid response format from Groq API: no choices",
                provider=self.provider.value,
            )
        message = response.choices[0].message
        if message is None or not message.content:
            raise InvalidResponseFormat(
                "Empty response content from Groq API",
                provider=self.provider.value,
            )
        return message.content
