"""Structured logging bootstrap.

One stdout handler is installed on the root logger (and on uvicorn's
loggers, which do not propagate).  Records are rendered as JSON lines
by default, or as coloured text when ``json_output`` is off.

Every record carries ``trace_id`` / ``span_id`` when an OpenTelemetry
span is active, so a provider failure logged by the integration service
can be matched to its ``llm.completion`` span.
"""

from __future__ import annotations

import logging
import sys

from opentelemetry import trace

from chatstore.configs.system import LoggingConfig

_DEV_FORMAT = "%(levelprefix)s %(asctime)s %(name)s  %(message)s"
_DEV_DATEFMT = "%H:%M:%S"
_JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class _TraceContextFilter(logging.Filter):
    """Adds OTEL trace/span IDs (empty strings outside a span)."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = trace.get_current_span().get_span_context()
        valid = ctx is not None and ctx.is_valid
        record.trace_id = format(ctx.trace_id, "032x") if valid else ""  # type: ignore[attr-defined]
        record.span_id = format(ctx.span_id, "016x") if valid else ""  # type: ignore[attr-defined]
        return True


def _build_formatter(config: LoggingConfig) -> logging.Formatter:
    if not config.json_output:
        from uvicorn.logging import DefaultFormatter

        return DefaultFormatter(fmt=_DEV_FORMAT, datefmt=_DEV_DATEFMT, use_colors=True)

    from pythonjsonlogger.json import JsonFormatter

    return JsonFormatter(
        fmt=_JSON_FORMAT,
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
        },
        static_fields={"service": config.service_name},
        defaults={"trace_id": "", "span_id": ""},
    )


def setup_logging(config: LoggingConfig | None = None) -> logging.Handler:
    """Install the stdout handler on the root logger and return it.

    Safe to call more than once; each call replaces the previous handler.
    """
    config = config or LoggingConfig()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_TraceContextFilter())
    handler.setFormatter(_build_formatter(config))

    root = logging.getLogger()
    root.setLevel(config.level.upper())
    root.handlers = [handler]

    for name in _UVICORN_LOGGERS:
        uvi = logging.getLogger(name)
        uvi.handlers = [handler]
        uvi.propagate = False

    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler
