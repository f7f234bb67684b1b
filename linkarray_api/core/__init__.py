"""Core business logic: session authentication, passwords and analytics."""

from .dashboard import DashboardManager
from .errors import (
    AuthError,
    Forbidden,
    InvalidToken,
    InvalidWindowError,
    TokenExpired,
    Unauthenticated,
)
from .passwords import hash_password, verify_password
from .session_auth import AuthConfig, RequestContext, SessionAuthenticator, utc_now
from .timeline import fill_daily_series, trailing_window

__all__ = [
    "AuthConfig",
    "AuthError",
    "DashboardManager",
    "Forbidden",
    "InvalidToken",
    "InvalidWindowError",
    "RequestContext",
    "SessionAuthenticator",
    "TokenExpired",
    "Unauthenticated",
    "fill_daily_series",
    "hash_password",
    "trailing_window",
    "utc_now",
    "verify_password",
]
