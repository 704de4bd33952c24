"""
Per-request correlation for generation traffic.
"""

from __future__ import annotations

import time
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from pitchdeck_ai.infra.config.logging_config import bind_context, clear_context, get_logger
from pitchdeck_ai.infra.observability import metrics

REQUEST_ID_HEADER = "X-Request-ID"

# Liveness polling would drown out generation traffic at INFO.
QUIET_PATHS = frozenset({"/health"})


def endpoint_label(request: Request) -> str:
    """Route template for metric labels, so path parameters cannot explode cardinality."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Binds a request id into the structlog context for the whole request.

    Backend attempts logged deep inside the orchestrator therefore carry the
    id of the HTTP request that caused them. The id is taken from the caller's
    X-Request-ID header when present and echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:  # type: ignore[override]
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        bind_context(
            request_id=request_id, method=request.method, path=request.url.path
        )
        logger = get_logger("http")
        log = logger.debug if request.url.path in QUIET_PATHS else logger.info

        log("request.start", client_ip=request.client.host if request.client else None)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:  # pragma: no cover
            logger.exception("request.error", error=str(exc))
            raise
        else:
            duration = time.perf_counter() - started
            response.headers[REQUEST_ID_HEADER] = request_id
            metrics.record_http_request(
                request.method, endpoint_label(request), response.status_code, duration
            )
            log(
                "request.end",
                status_code=response.status_code,
                duration=round(duration, 3),
            )
            return response
        finally:
            clear_context()
