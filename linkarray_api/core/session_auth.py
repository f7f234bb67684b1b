"""Session token issuance, verification and role gating.

A request is authenticated in a fixed chain that stops at the first
rejection:

    verify(token) -> resolve_identity(user_id) -> authorize(user, roles)

Tokens are stateless HS256 JWTs carrying the user id in ``sub`` and an
absolute expiry in ``exp``. Nothing is stored server side, so a token for a
deleted account only stops working because ``resolve_identity`` finds no
user on the next request.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import jwt
from jwt.utils import base64url_decode, base64url_encode
from pydantic import BaseModel, ConfigDict

from ..models.user import Role, User
from .errors import Forbidden, InvalidToken, TokenExpired, Unauthenticated

if TYPE_CHECKING:
    from ..config import Settings
    from ..storage import Database

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def _is_canonical_segment(segment: str) -> bool:
    """True if a base64url segment re-encodes to exactly itself.

    Base64 ignores the unused low bits of the final character, so several
    spellings decode to the same bytes. Only the one we would emit is accepted.
    """
    try:
        decoded = base64url_decode(segment)
    except ValueError:
        return False
    return base64url_encode(decoded).decode("ascii") == segment


@dataclass(frozen=True)
class AuthConfig:
    """Signing configuration for session tokens, fixed at startup."""

    secret: str
    algorithm: str = "HS256"
    token_lifetime: timedelta = timedelta(hours=1)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "AuthConfig":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            token_lifetime=timedelta(minutes=settings.token_lifetime_minutes),
        )


class RequestContext(BaseModel):
    """Authenticated caller, passed explicitly to route handlers."""

    model_config = ConfigDict(frozen=True)

    user: User
    token: str

    @property
    def user_id(self) -> str:
        return self.user.id

    @property
    def role(self) -> str:
        return self.user.role


class SessionAuthenticator:
    """Issues and verifies session tokens and gates access by role."""

    def __init__(self, config: AuthConfig, clock: Clock = utc_now):
        """Initialize authenticator.

        Args:
            config: Signing secret, algorithm and token lifetime
            clock: Returns the current aware datetime; injectable for tests
        """
        self.config = config
        self._clock = clock

    def issue(self, identity_id: str) -> str:
        """Create a signed token for an existing user.

        The token expires exactly ``config.token_lifetime`` after issuance
        (to the second).
        """
        issued_at = int(self._clock().timestamp())
        expires_at = issued_at + int(self.config.token_lifetime.total_seconds())
        payload = {"sub": identity_id, "iat": issued_at, "exp": expires_at}
        return jwt.encode(payload, self.config.secret, algorithm=self.config.algorithm)

    def verify(self, raw_token: str | None) -> str:
        """Verify a token and return the user id it was issued for.

        Verification only covers signature, structure and expiry; the user
        may no longer exist.

        Raises:
            Unauthenticated: No token supplied
            InvalidToken: Signature or structure invalid
            TokenExpired: Token valid but past its expiry
        """
        if not raw_token:
            raise Unauthenticated("No credential supplied")

        segments = raw_token.split(".")
        if not raw_token.isascii() or len(segments) != 3:
            raise InvalidToken()
        if not _is_canonical_segment(segments[2]):
            raise InvalidToken("Token signature is not canonical")

        try:
            # Time claims are checked against the injected clock below
            payload = jwt.decode(
                raw_token,
                self.config.secret,
                algorithms=[self.config.algorithm],
                options={
                    "require": ["sub", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.PyJWTError as e:
            logger.debug(f"Token rejected: {e}")
            raise InvalidToken() from e

        identity_id = payload.get("sub")
        expires_at = payload.get("exp")
        if not isinstance(identity_id, str) or not identity_id:
            raise InvalidToken("Token subject is not a user id")
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise InvalidToken("Token expiry is not a timestamp")

        if self._clock().timestamp() >= expires_at:
            raise TokenExpired()

        return identity_id

    async def resolve_identity(self, db: "Database", identity_id: str) -> User | None:
        """Look up the user a verified token refers to."""
        row = await db.get_user(identity_id)
        return User(**row) if row else None

    @staticmethod
    def authorize(identity: User | None, allowed_roles: Iterable[Role | str]) -> None:
        """Allow the call only if the user's role is one of ``allowed_roles``.

        Raises:
            Unauthenticated: No resolved user
            Forbidden: Role not permitted
        """
        if identity is None:
            raise Unauthenticated()

        allowed = {Role(role).value for role in allowed_roles}
        if Role(identity.role).value not in allowed:
            logger.info(f"Role '{identity.role}' denied (allowed: {sorted(allowed)})")
            raise Forbidden()

    async def authenticate(
        self,
        db: "Database",
        raw_token: str | None,
        allowed_roles: Iterable[Role | str] | None = None,
    ) -> RequestContext:
        """Run the full chain and return the caller's context.

        Raises:
            AuthError: The first rejection in the chain
        """
        if not raw_token:
            raise Unauthenticated("No credential supplied")

        identity_id = self.verify(raw_token)

        user = await self.resolve_identity(db, identity_id)
        if user is None:
            logger.info(f"Token subject no longer exists: {identity_id}")
            raise Unauthenticated("Account no longer exists")

        if allowed_roles is not None:
            self.authorize(user, allowed_roles)

        return RequestContext(user=user, token=raw_token)
