"""
Prometheus metrics and OpenTelemetry spans for generation traffic.

Only ``opentelemetry-api`` is required: without an SDK configured by the
deployment, spans are no-ops.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from opentelemetry import trace
from prometheus_client import Counter, Histogram, start_http_server

from pitchdeck_ai.infra.config.logging_config import get_logger

logger = get_logger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "endpoint", "status_code"]
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
)

GENERATION_ATTEMPTS = Counter(
    "ai_generation_attempts_total",
    "Backend attempts made by the generation orchestrator",
    ["provider", "operation", "outcome"],  # outcome: success, failure, skipped
)

PROVIDER_ERRORS = Counter(
    "ai_provider_errors_total",
    "Classified backend failures",
    ["provider", "kind"],
)

GENERATION_DURATION = Histogram(
    "ai_generation_duration_seconds",
    "Duration of a single backend attempt in seconds",
    ["provider", "operation"],
)

GENERATION_RESULTS = Counter(
    "ai_generation_results_total",
    "Orchestrated generation outcomes",
    ["operation", "status"],  # status: success, exhausted, cancelled
)

LLM_TOKEN_USAGE = Counter(
    "llm_tokens_used_total",
    "Total LLM tokens used",
    ["model"],
)


def start_metrics_server(port: int) -> bool:
    """Expose /metrics on ``port``; returns False when the port is unavailable."""
    try:
        start_http_server(port)
    except OSError as e:
        logger.error("metrics.server.failed", port=port, error=str(e))
        return False
    logger.info("metrics.server.started", port=port)
    return True


def get_tracer() -> trace.Tracer:
    """Get OpenTelemetry tracer."""
    return trace.get_tracer("pitchdeck_ai")


@asynccontextmanager
async def trace_operation(
    operation_name: str, **attributes: Any
) -> AsyncGenerator[trace.Span, None]:
    """Context manager for tracing async operations."""
    tracer = get_tracer()
    with tracer.start_as_current_span(operation_name) as span:
        for key, value in attributes.items():
            span.set_attribute(key, str(value))
        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
            raise


class MetricsCollector:
    """Helper class for collecting application metrics."""

    @staticmethod
    def record_http_request(
        method: str, endpoint: str, status_code: int, duration: float
    ) -> None:
        """Record HTTP request metrics."""
        REQUEST_COUNT.labels(
            method=method, endpoint=endpoint, status_code=status_code
        ).inc()
        REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration)

    @staticmethod
    def record_attempt(
        provider: str, operation: str, outcome: str, duration: float = 0.0
    ) -> None:
        GENERATION_ATTEMPTS.labels(
            provider=provider, operation=operation, outcome=outcome
        ).inc()
        if outcome != "skipped":
            GENERATION_DURATION.labels(provider=provider, operation=operation).observe(
                duration
            )

    @staticmethod
    def record_provider_error(provider: str, kind: str) -> None:
        PROVIDER_ERRORS.labels(provider=provider, kind=kind).inc()

    @staticmethod
    def record_result(operation: str, status: str) -> None:
        GENERATION_RESULTS.labels(operation=operation, status=status).inc()

    @staticmethod
    def record_llm_usage(model: str, tokens: int) -> None:
        """Record LLM usage metrics."""
        if tokens > 0:
            LLM_TOKEN_USAGE.labels(model=model).inc(tokens)


# Global metrics collector instance
metrics = MetricsCollector()
