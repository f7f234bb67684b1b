"""
Request Logging Middleware

Logs every HTTP request with its status code and duration, and tags it with
a correlation ID that is echoed back in the X-Request-ID header.
"""

import logging
import time
import uuid
from collections.abc import Callable
from contextvars import ContextVar

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("linkarray_api.access")

# Correlation ID of the request being handled in the current async context
_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracing."""
    return str(uuid.uuid4())


def get_request_id() -> str | None:
    """Get the correlation ID of the current request, if any."""
    return _request_id.get()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log with correlation IDs."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process the request and log its outcome."""
        start_time = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or generate_correlation_id()
        token = _request_id.set(request_id)
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"{request.method} {request.url.path} failed after {duration_ms:.1f}ms "
                f"[{request_id}]: {type(e).__name__}: {e}"
            )
            raise
        finally:
            _request_id.reset(token)

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} "
            f"{duration_ms:.1f}ms [{request_id}]"
        )

        response.headers["X-Request-ID"] = request_id
        return response
