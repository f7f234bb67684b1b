"""HTTP middleware for the linkarray service."""

from .api_key import ApiKeyMiddleware
from .request_logging import RequestLoggingMiddleware, get_request_id

__all__ = ["ApiKeyMiddleware", "RequestLoggingMiddleware", "get_request_id"]
