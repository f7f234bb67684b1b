"""FastAPI dependencies for session authentication."""

from collections.abc import Awaitable, Callable

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config import settings
from ..core import AuthConfig, RequestContext, SessionAuthenticator, utc_now
from ..core.session_auth import Clock
from ..models import Role
from ..storage import Database, get_db

# Bearer header is accepted as a fallback to the session cookie
bearer_scheme = HTTPBearer(auto_error=False)


def get_clock() -> Clock:
    """Dependency returning the clock used for token expiry and dashboard dates."""
    return utc_now


def get_authenticator(clock: Clock = Depends(get_clock)) -> SessionAuthenticator:
    """Dependency to get the session authenticator."""
    return SessionAuthenticator(AuthConfig.from_settings(settings), clock=clock)


def extract_token(
    request: Request, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    """Read the session token from the cookie, then the Authorization header."""
    token = request.cookies.get(settings.token_cookie_name)
    if token:
        return token
    if credentials is not None:
        return credentials.credentials
    return None


async def get_request_context(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Database = Depends(get_db),
    authenticator: SessionAuthenticator = Depends(get_authenticator),
) -> RequestContext:
    """Authenticate the caller.

    Usage in routes:
        @router.get("/protected")
        async def protected(context: RequestContext = Depends(get_request_context)):
            ...
    """
    return await authenticator.authenticate(db, extract_token(request, credentials))


def require_roles(*roles: Role) -> Callable[..., Awaitable[RequestContext]]:
    """Build a dependency that authenticates the caller and checks their role."""

    async def dependency(
        context: RequestContext = Depends(get_request_context),
    ) -> RequestContext:
        SessionAuthenticator.authorize(context.user, roles)
        return context

    return dependency


require_admin = require_roles(Role.ADMIN)


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the session token as an HTTP-only cookie."""
    response.set_cookie(
        key=settings.token_cookie_name,
        value=token,
        max_age=settings.token_lifetime_minutes * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "lax",
    )


def clear_session_cookie(response: Response) -> None:
    """Remove the session cookie from the client."""
    response.delete_cookie(
        key=settings.token_cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "lax",
    )
