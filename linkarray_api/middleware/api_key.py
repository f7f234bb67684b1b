"""API key gate for the versioned API."""

import logging
import secrets
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from ..config import settings

logger = logging.getLogger(__name__)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Require the shared client API key on ``/api/`` routes in production.

    In development every request passes, so the SPA and local tools can
    call the API without a key.
    """

    PROTECTED_PREFIX = "/api/"

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request through the API key check."""
        if not request.url.path.startswith(self.PROTECTED_PREFIX):
            return await call_next(request)

        if not settings.is_production:
            return await call_next(request)

        api_key = request.headers.get(settings.api_key_header)
        if not api_key:
            return JSONResponse(
                status_code=401,
                content={"detail": f"Missing {settings.api_key_header} header"},
            )

        if not secrets.compare_digest(api_key.encode(), settings.api_key.encode()):
            logger.warning(f"Invalid API key on {request.method} {request.url.path}")
            return JSONResponse(status_code=401, content={"detail": "Invalid API Key"})

        return await call_next(request)
