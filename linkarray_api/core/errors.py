"""Classified errors raised by the authentication chain and the timeline aggregator."""


class AuthError(Exception):
    """Base class for authentication and authorization failures.

    Each subclass carries the HTTP status the route layer reports it with
    and a stable machine-readable code.
    """

    status_code = 401
    code = "auth_error"
    default_detail = "Authentication failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(AuthError):
    """No credential supplied, or its subject no longer exists."""

    code = "unauthenticated"
    default_detail = "Login to your account"


class InvalidToken(AuthError):
    """Token signature or structure failed verification."""

    code = "invalid_token"
    default_detail = "Invalid Token"


class TokenExpired(AuthError):
    """Token verified but its expiry has passed."""

    code = "token_expired"
    default_detail = "Token Expired"


class Forbidden(AuthError):
    """Identity resolved but its role is not permitted."""

    status_code = 403
    code = "forbidden"
    default_detail = "Sorry, you do not have access"


class InvalidWindowError(ValueError):
    """Raised when a date window starts after it ends."""

    pass
