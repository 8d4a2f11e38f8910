"""OpenTelemetry bootstrap: tracing initialisation and helpers.

Configures a ``TracerProvider`` with an OTLP HTTP exporter when tracing is
enabled via ``TracingConfig``.  When disabled the module is a graceful no-op
(local dev without a collector) and ``tracer`` hands out non-recording spans.

Auto-instrumentations wired here:

- **FastAPI** (inbound HTTP spans)
- **httpx** (outbound HTTP spans, including provider completion calls)

Usage::

    from chatstore.infra.telemetry import SPAN_LLM_COMPLETION, tracer

    with tracer.start_as_current_span(SPAN_LLM_COMPLETION) as span:
        ...
"""

from __future__ import annotations

import base64
import logging

from opentelemetry import trace

from chatstore.configs.system import TracingConfig

logger = logging.getLogger(__name__)

tracer = trace.get_tracer("chatstore")

# ---------------------------------------------------------------------------
# Span names
# ---------------------------------------------------------------------------

SPAN_LLM_COMPLETION = "llm.completion"
SPAN_LLM_INTEGRATION = "llm.integration"

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_LLM_PROVIDER = "llm.provider"
ATTR_LLM_MODEL = "llm.model"
ATTR_LLM_MESSAGE_COUNT = "llm.message_count"
ATTR_LLM_STATUS_CODE = "llm.status_code"
ATTR_LLM_HISTORY_LEN = "llm.history_len"
ATTR_LLM_CONTEXT_MODE = "llm.context_mode"  # "native" | "flattened" | "none"
ATTR_LLM_FALLBACK = "llm.fallback"


def init_telemetry(
    app: object | None = None,
    settings: TracingConfig | None = None,
) -> bool:
    """Initialise the OTEL ``TracerProvider`` and auto-instrumentations.

    Returns ``True`` when tracing was switched on.
    """
    if settings is None or not settings.enabled:
        logger.info("OpenTelemetry tracing disabled.")
        return False

    if not settings.endpoint or not settings.username or not settings.password:
        logger.warning(
            "Tracing enabled but endpoint/credentials not configured; "
            "skipping OpenTelemetry setup."
        )
        return False

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
        OTLPSpanExporter,
    )
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

    resource = Resource.create({"service.name": settings.service_name})

    sampler = ParentBased(root=TraceIdRatioBased(settings.sample_rate))
    provider = TracerProvider(resource=resource, sampler=sampler)

    credentials = f"{settings.username}:{settings.password}"
    encoded = base64.b64encode(credentials.encode()).decode()
    headers = {"Authorization": f"Basic {encoded}"}

    exporter = OTLPSpanExporter(
        endpoint=settings.endpoint,
        headers=headers,
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    if app is not None:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        excluded = ",".join(settings.excluded_urls) if settings.excluded_urls else ""
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded)

    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

    HTTPXClientInstrumentor().instrument()

    logger.info(
        "OpenTelemetry tracing initialised (service=%s).", settings.service_name
    )
    return True

