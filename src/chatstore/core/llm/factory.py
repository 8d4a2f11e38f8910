"""LLM client factory.

``build_client`` runs once at startup.  It always returns a usable
client: any configuration or construction problem degrades to the
no-op client so the storage service keeps running without an LLM.
"""

from __future__ import annotations

import logging

import httpx

from chatstore.configs.system import LLMConfig, ProviderKind

from .base import LLMClient
from .exceptions import UnsupportedProviderError
from .groq import GroqClient
from .http import HttpLLMClient, build_http_client
from .noop import NoOpLLMClient
from .ollama import OllamaClient

logger = logging.getLogger(__name__)

_CLIENTS: dict[ProviderKind, type[HttpLLMClient]] = {
    ProviderKind.GROQ: GroqClient,
    ProviderKind.LOCAL_OLLAMA: OllamaClient,
}


def build_client(
    config: LLMConfig,
    *,
    transport: httpx.BaseTransport | None = None,
) -> LLMClient:
    """Select and construct the client for *config*.

    ``transport`` is handed to ``httpx.Client`` (tests pass a
    ``MockTransport``).
    """
    if not config.is_configured():
        logger.warning(
            "LLM is not configured. Chat storage service will operate "
            "without LLM integration."
        )
        return NoOpLLMClient()

    try:
        return _create_client(config, transport)
    except UnsupportedProviderError as exc:
        logger.warning("%s. Falling back to no-op client.", exc)
    except Exception as exc:
        logger.error(
            "Failed to configure LLM client. Falling back to no-op mode. Error: %s",
            exc,
        )
    return NoOpLLMClient()


def _create_client(
    config: LLMConfig,
    transport: httpx.BaseTransport | None,
) -> LLMClient:
    client_cls = _CLIENTS.get(config.provider)
    if client_cls is None:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {config.provider.value}"
        )

    http_client = build_http_client(config, transport)
    logger.info(
        "Configuring %s client for model: %s", config.provider.value, config.model
    )
    return client_cls(config, http_client)
