"""LLM provider errors.

Everything below the integration service raises; the service is the only
place these are absorbed and turned into user-facing text.
"""

from __future__ import annotations


class LLMError(Exception):
    """Base class for LLM provider errors."""


class MissingCredentialError(LLMError):
    """A hosted provider was selected but no API key is configured."""


class UnsupportedProviderError(LLMError):
    """The configured provider kind has no client implementation."""


class ProviderCallError(LLMError):
    """A completion call failed: transport error, timeout or non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class InvalidResponseFormat(ProviderCallError):
    """The provider answered 2xx but the body carries no usable reply text."""
