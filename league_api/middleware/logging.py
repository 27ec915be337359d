"""Structured request logging middleware"""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from league_api.core.config import logger

CORRELATION_HEADER = "X-Correlation-ID"


def get_client_ip(request: Request) -> str:
    """Client address, honoring proxy headers"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if request.headers.get("X-Real-IP"):
        return request.headers["X-Real-IP"]
    return request.client.host if request.client else "unknown"


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    One log line when a request arrives and one when it finishes

    Each request carries a correlation id, taken from the incoming
    X-Correlation-ID header when present, echoed back on the response.
    The finishing line names the resource owner of the bearer token, if
    authentication resolved one.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
        request.state.correlation_id = correlation_id

        context = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": get_client_ip(request),
        }
        label = f"{request.method} {request.url.path}"
        started = time.perf_counter()

        logger.info(
            f"Request started: {label}",
            extra={**context, "user_agent": request.headers.get("User-Agent", "unknown")},
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Request failed: {label} - {e}",
                extra={**context, "error_type": type(e).__name__, "duration_ms": elapsed_ms(started)},
                exc_info=True,
            )
            raise

        token = getattr(request.state, "token", None)
        logger.info(
            f"Request completed: {label} - {response.status_code}",
            extra={
                **context,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms(started),
                "resource_owner_id": token.resource_owner_id if token else None,
            },
        )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response


def elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
