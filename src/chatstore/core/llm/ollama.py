"""Ollama client (local runtime, ``/api/chat``).

Single-turn only: the integration service flattens history into one
prompt for this provider.  Timeouts surface as ``ProviderCallError``
like any other transport failure.
"""

from __future__ import annotations

from chatstore.configs.system import ProviderKind

from .exceptions import InvalidResponseFormat
from .http import HttpLLMClient
from .models import ROLE_USER, ChatMessage, OllamaRequest, OllamaResponse


class OllamaClient(HttpLLMClient):
    """Local Ollama runtime client."""

    provider = ProviderKind.LOCAL_OLLAMA
    endpoint = "api/chat"

    def get_chat_completion(self, text: str, *, timeout: float | None = None) -> str:
        request = OllamaRequest(
            model=self._config.model,
            messages=[ChatMessage(role=ROLE_USER, content=text)],
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
            top_p=self._config.top_p,
        )
        body = self._post(request, 1, timeout)
        response: OllamaResponse = self._parse(OllamaResponse, body)
        if response.message is None or not response.message.content:
            raise InvalidResponseFormat(
                "Invalid response format from Ollama API",
                provider=self.provider.value,
            )
        return response.message.content
