"""Mapping of core errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core import AuthError

logger = logging.getLogger(__name__)


async def auth_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render an AuthError as JSON with its status code."""
    if not isinstance(exc, AuthError):
        raise exc
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    logger.info(f"{request.method} {request.url.path} rejected: {exc.code}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the core error handlers on an application."""
    app.add_exception_handler(AuthError, auth_error_handler)
