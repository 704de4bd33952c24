"""
Structured logging for the generation service.

Every record is a structlog event with a dotted name such as
``generation.attempt.failed`` plus key/value fields. Context bound with
``bind_context`` (request id, slide type) is merged into each record, and so
are OpenTelemetry ids whenever a backend attempt span is active.
"""

from __future__ import annotations

import logging
from typing import Any, MutableMapping, Optional

import structlog
from opentelemetry import trace

from pitchdeck_ai.infra.config.settings import get_settings

# HTTP clients used by the backends log every upstream call at INFO.
CHATTY_LOGGERS = ("httpx", "httpcore", "openai")


def add_trace_context(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Attach the active trace/span ids so log lines join up with attempt spans."""
    ctx = trace.get_current_span().get_span_context()
    if ctx.is_valid:
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(
    log_level: Optional[str] = None, log_format: Optional[str] = None
) -> None:
    """Configure structlog over stdlib logging.

    Args:
        log_level: Level name; defaults to LOG_LEVEL.
        log_format: "json" or "console"; defaults to LOG_FORMAT.
    """
    settings = get_settings()
    level = _resolve_level(log_level or settings.log_level or "INFO")
    fmt = (log_format or settings.log_format or "json").lower()

    logging.basicConfig(level=level, format="%(message)s")
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    renderer = (
        structlog.dev.ConsoleRenderer()
        if fmt == "console"
        else structlog.processors.JSONRenderer(sort_keys=True)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            add_trace_context,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:  # type: ignore[name-defined]
    return structlog.get_logger(name) if name else structlog.get_logger()


def bind_context(**kwargs: Any) -> None:
    """Bind fields (request_id, slide_type, ...) onto every later record in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
