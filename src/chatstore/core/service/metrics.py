"""Prometheus metrics for the chatstore application.

Custom business metrics that complement the auto-instrumented HTTP
metrics provided by ``prometheus-fastapi-instrumentator``.

All metrics use the ``chatstore_`` prefix.
"""

import logging

from fastapi import FastAPI
from prometheus_client import Counter, Gauge, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from chatstore.configs.system import MetricsConfig, TracingConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Provider call metrics
# ---------------------------------------------------------------------------

LLM_REQUESTS_TOTAL = Counter(
    "chatstore_llm_requests_total",
    "Total provider completion calls, by outcome",
    ["provider", "status"],  # "ok" | "error" | "invalid_response"
)

LLM_LATENCY_SECONDS = Histogram(
    "chatstore_llm_latency_seconds",
    "Latency of provider completion calls",
    ["provider"],
    buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10, 30, 60),
)

LLM_CALLS_IN_FLIGHT = Gauge(
    "chatstore_llm_calls_in_flight",
    "Number of provider calls currently in-flight",
    ["provider"],
)

# ---------------------------------------------------------------------------
# Integration service metrics
# ---------------------------------------------------------------------------

LLM_FALLBACK_RESPONSES_TOTAL = Counter(
    "chatstore_llm_fallback_responses_total",
    "Placeholder replies returned instead of a provider reply",
    ["reason"],  # "unavailable" | "error"
)


def build_metrics(
    app: FastAPI,
    config: MetricsConfig,
    tracing: TracingConfig,
) -> None:
    """Attach HTTP instrumentation and the ``/metrics`` endpoint to *app*."""
    if not config.enabled:
        logger.info("Prometheus metrics disabled.")
        return

    Instrumentator(
        should_instrument_requests_inprogress=True,
        excluded_handlers=tracing.excluded_urls,
    ).instrument(app).expose(app, endpoint="/metrics")

    logger.info("Prometheus metrics initialised")
