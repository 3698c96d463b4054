"""
FastAPI middleware for observability.

Correlation ids for every HTTP exchange and one log line per request,
tagged with the area it hit (admin API or a simulated transport).

Dependencies: fastapi, starlette, simulator.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from simulator.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def request_area(request: Request) -> str:
    """Classify a request path as "admin", "rest", "ws" or "other"."""
    path = request.url.path
    if path.startswith("/api/"):
        return "admin"
    settings = getattr(request.app.state, "settings", None)
    if settings is not None:
        if path.startswith(settings.rest.url_mapping.rstrip("/") or "/"):
            return "rest"
        if path.startswith(settings.ws.servlet_mapping.rstrip("/") or "/"):
            return "ws"
    return "other"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every HTTP request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        context = {
            "method": request.method,
            "path": request.url.path,
            "area": request_area(request),
            "correlation_id": get_correlation_id(),
        }

        try:
            response: Response = await call_next(request)
        except Exception as e:
            context["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            logger.exception(
                "%s %s failed: %s",
                request.method,
                request.url.path,
                type(e).__name__,
                extra=context,
            )
            raise

        context["status_code"] = response.status_code
        context["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            "%s %s -> %d (%.1f ms, %s)",
            request.method,
            request.url.path,
            response.status_code,
            context["duration_ms"],
            context["area"],
            extra=context,
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """
    Correlation id propagation.

    Reuses the caller's X-Correlation-ID or generates one, keeps it in the
    context for the duration of the request and echoes it on the response.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
