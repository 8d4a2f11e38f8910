"""LLM provider clients and the startup factory that picks one."""

from .base import LLMClient, SupportsContext  # noqa: F401
from .exceptions import (  # noqa: F401
    InvalidResponseFormat,
    LLMError,
    MissingCredentialError,
    ProviderCallError,
    UnsupportedProviderError,
)
from .factory import build_client  # noqa: F401
from .groq import GroqClient  # noqa: F401
from .models import ConversationTurn, MessageSender  # noqa: F401
from .noop import NoOpLLMClient  # noqa: F401
from .ollama import OllamaClient  # noqa: F401
