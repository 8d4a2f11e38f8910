"""Provider client interface.

Every provider implements ``LLMClient``.  Providers that can send the
conversation as native multi-turn messages additionally satisfy the
``SupportsContext`` protocol; callers test for the capability rather
than for a concrete class.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from .models import ConversationTurn


class LLMClient(ABC):
    """Synchronous chat-completion client for one provider."""

    @abstractmethod
    def get_chat_completion(self, text: str, *, timeout: float | None = None) -> str:
        """Send *text* as a single user turn and return the reply.

        ``timeout`` (seconds) overrides the configured timeout for this
        call only.

        Raises:
            ProviderCallError: transport failure, timeout, non-2xx status,
                or a body without reply text.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Whether this client is the configured, usable provider.

        Must not perform I/O.
        """

    def close(self) -> None:
        """Release transport resources (no-op by default)."""


@runtime_checkable
class SupportsContext(Protocol):
    """Capability: completion over a full conversation history."""

    def get_chat_completion_with_context(
        self,
        history: Sequence[ConversationTurn],
        current_text: str,
        *,
        timeout: float | None = None,
    ) -> str: ...
