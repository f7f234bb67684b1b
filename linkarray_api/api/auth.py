"""Signup, login and logout endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from ..config import settings
from ..core import SessionAuthenticator, hash_password, verify_password
from ..models import AuthResponse, LoginRequest, MessageResponse, SignupRequest, User
from ..storage import Database, DuplicateError, get_db
from .deps import clear_session_cookie, get_authenticator, set_session_cookie

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=201,
    summary="Register a new account",
    description="""
Create an account and log it in.

The session token is returned in the body and set as an HTTP-only
`token` cookie valid for one hour.
""",
)
async def signup(
    request: SignupRequest,
    response: Response,
    db: Database = Depends(get_db),
    authenticator: SessionAuthenticator = Depends(get_authenticator),
) -> AuthResponse:
    """Register a user and start a session."""
    try:
        password_hash = hash_password(request.password, settings.bcrypt_rounds)
        row = await db.create_user(
            name=request.name,
            username=request.username,
            email=request.email,
            password_hash=password_hash,
        )
    except DuplicateError as e:
        raise HTTPException(status_code=409, detail=f"{e.field.capitalize()} already exists")
    except Exception as e:
        logger.error(f"Error creating user: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Something went wrong")

    user = User(**row)
    token = authenticator.issue(user.id)
    set_session_cookie(response, token)

    logger.info(f"User registered: {user.username}")
    return AuthResponse(message="Registration & Login successful", token=token, user=user)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in",
    description="Check email and password and start a one-hour session.",
)
async def login(
    request: LoginRequest,
    response: Response,
    db: Database = Depends(get_db),
    authenticator: SessionAuthenticator = Depends(get_authenticator),
) -> AuthResponse:
    """Log a user in."""
    try:
        row = await db.get_user_by_field("email", request.email)
        if not row:
            raise HTTPException(status_code=404, detail="User not found")

        password_hash = await db.get_password_hash(row["id"])
        if not password_hash or not verify_password(request.password, password_hash):
            raise HTTPException(status_code=401, detail="Invalid credentials")

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error logging in: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Something went wrong")

    token = authenticator.issue(row["id"])
    set_session_cookie(response, token)

    logger.info(f"User logged in: {row['username']}")
    return AuthResponse(message="Login successful", token=token)


@router.post("/logout", response_model=MessageResponse, summary="Log out")
async def logout(response: Response) -> MessageResponse:
    """Clear the session cookie. Tokens are stateless, so nothing else is revoked."""
    clear_session_cookie(response)
    return MessageResponse(message="Logout successful")
