"""Shared HTTP plumbing for provider clients.

``build_http_client`` binds an ``httpx.Client`` to the provider's base
URL with the configured timeout and credentials.  ``HttpLLMClient``
posts one JSON payload per completion and maps every transport-level
failure to ``ProviderCallError``; decoding the reply is left to each
provider.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from chatstore.configs.system import LLMConfig, ProviderKind
from chatstore.core.service.metrics import (
    LLM_CALLS_IN_FLIGHT,
    LLM_LATENCY_SECONDS,
    LLM_REQUESTS_TOTAL,
)
from chatstore.infra.telemetry import (
    ATTR_LLM_MESSAGE_COUNT,
    ATTR_LLM_MODEL,
    ATTR_LLM_PROVIDER,
    ATTR_LLM_STATUS_CODE,
    SPAN_LLM_COMPLETION,
    tracer,
)

from .base import LLMClient
from .exceptions import InvalidResponseFormat, MissingCredentialError, ProviderCallError

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}
_ERROR_BODY_PREVIEW = 500


def build_http_client(
    config: LLMConfig,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create the provider transport for *config*.

    Raises:
        MissingCredentialError: the provider needs an API key and none is set.
    """
    headers = dict(_JSON_HEADERS)
    if config.requires_api_key:
        if not config.api_key.strip():
            raise MissingCredentialError(
                f"API key is required for provider: {config.provider.value}"
            )
        headers["Authorization"] = f"Bearer {config.api_key}"

    return httpx.Client(
        base_url=config.effective_base_url,
        headers=headers,
        timeout=config.timeout.total_seconds(),
        transport=transport,
    )


class HttpLLMClient(LLMClient):
    """Base for providers reached over a JSON HTTP API."""

    provider: ProviderKind
    endpoint: str

    def __init__(self, config: LLMConfig, http_client: httpx.Client) -> None:
        self._config = config
        self._http = http_client

    @property
    def config(self) -> LLMConfig:
        return self._config

    def is_available(self) -> bool:
        return self._config.provider is self.provider and self._config.is_configured()

    def close(self) -> None:
        self._http.close()

    # ------------------------------------------------------------------
    # Request / response
    # ------------------------------------------------------------------

    def _post(
        self,
        payload: BaseModel,
        message_count: int,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """POST *payload* and return the decoded JSON body."""
        name = self.provider.value
        request_timeout = (
            timeout if timeout is not None else self._config.timeout.total_seconds()
        )
        with tracer.start_as_current_span(SPAN_LLM_COMPLETION) as span:
            span.set_attribute(ATTR_LLM_PROVIDER, name)
            span.set_attribute(ATTR_LLM_MODEL, self._config.model)
            span.set_attribute(ATTR_LLM_MESSAGE_COUNT, message_count)
            logger.debug(
                "Sending %d message(s) to %s (model=%s)",
                message_count,
                name,
                self._config.model,
            )
            LLM_CALLS_IN_FLIGHT.labels(provider=name).inc()
            start = time.monotonic()
            try:
                response = self._http.post(
                    self.endpoint,
                    json=payload.model_dump(),
                    timeout=request_timeout,
                )
            except httpx.TimeoutException as exc:
                LLM_REQUESTS_TOTAL.labels(provider=name, status="error").inc()
                raise ProviderCallError(
                    f"{name} request timed out after {request_timeout}s",
                    provider=name,
                ) from exc
            except httpx.HTTPError as exc:
                LLM_REQUESTS_TOTAL.labels(provider=name, status="error").inc()
                raise ProviderCallError(
                    f"{name} request failed: {exc}", provider=name
                ) from exc
            finally:
                LLM_CALLS_IN_FLIGHT.labels(provider=name).dec()
                LLM_LATENCY_SECONDS.labels(provider=name).observe(
                    time.monotonic() - start
                )

            span.set_attribute(ATTR_LLM_STATUS_CODE, response.status_code)
            if response.is_error:
                LLM_REQUESTS_TOTAL.labels(provider=name, status="error").inc()
                raise ProviderCallError(
                    f"{name} API error: {response.status_code} - "
                    f"{response.text[:_ERROR_BODY_PREVIEW]}",
                    provider=name,
                    status_code=response.status_code,
                )

            try:
                body = response.json()
            except ValueError as exc:
                LLM_REQUESTS_TOTAL.labels(
                    provider=name, status="invalid_response"
                ).inc()
                raise InvalidResponseFormat(
                    f"{name} returned a non-JSON body",
                    provider=name,
                    status_code=response.status_code,
                ) from exc

            LLM_REQUESTS_TOTAL.labels(provider=name, status="ok").inc()
            return body

    def _parse(self, model: type[BaseModel], body: Any) -> Any:
        """Validate *body* against *model* or raise ``InvalidResponseFormat``."""
        try:
            return model.model_validate(body)
        except ValidationError as exc:
            raise InvalidResponseFormat(
                f"Invalid response format from {self.provider.value} API",
                provider=self.provider.value,
            ) from exc
