"""User profile endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Response

from ..core import RequestContext
from ..models import (
    Link,
    PublicProfile,
    PublicProfileResponse,
    User,
    UserDeletedResponse,
    UserResponse,
)
from ..storage import Database, get_db
from .deps import clear_session_cookie, get_request_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/user", tags=["users"])


@router.get("/profile", response_model=UserResponse, summary="Get own profile")
async def get_profile(
    context: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
) -> UserResponse:
    """Get the caller's profile with all of their links."""
    try:
        row = await db.get_user(context.user_id, with_links=True)
        if not row:
            raise HTTPException(status_code=404, detail="User not found, try again")

        return UserResponse(message="Profile details fetched successfully", user=User(**row))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting profile: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.delete(
    "/profile",
    response_model=UserDeletedResponse,
    summary="Delete own account",
    description="Delete the caller's account and every link it owns. This cannot be undone!",
)
async def delete_account(
    response: Response,
    context: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
) -> UserDeletedResponse:
    """Delete the caller's account."""
    try:
        deleted, deleted_links = await db.delete_user(context.user_id)
        if not deleted:
            raise HTTPException(status_code=404, detail="User not found")

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting account: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    clear_session_cookie(response)
    logger.info(f"Account deleted: {context.user_id}")

    return UserDeletedResponse(
        message="User and associated data deleted successfully",
        deleted_user=User(**deleted),
        deleted_links_count=deleted_links,
    )


@router.get(
    "/{username}",
    response_model=PublicProfileResponse,
    summary="Get a public profile",
    description="Public page data for a username: name and visible links only.",
)
async def get_public_profile(
    username: str = Path(
        ...,
        min_length=3,
        pattern=r"^[a-zA-Z0-9]*[a-zA-Z][a-zA-Z0-9]*$",
        description="Letters and digits, at least one letter",
    ),
    db: Database = Depends(get_db),
) -> PublicProfileResponse:
    """Get a user's public profile."""
    try:
        row = await db.get_user_by_field("username", username)
        if not row:
            raise HTTPException(status_code=404, detail="User does not exist")

        links = await db.list_links(row["id"], visible_only=True)
        profile = PublicProfile(
            name=row["name"],
            username=row["username"],
            links=[Link(**link) for link in links],
        )
        return PublicProfileResponse(message="User details fetched successfully", user=profile)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting public profile: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
