"""Admin dashboard and user management endpoints."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from ..config import settings
from ..core import DashboardManager, RequestContext
from ..core.session_auth import Clock
from ..models import DashboardResponse, User, UserDeletedResponse, UserResponse, UserUpdateRequest
from ..storage import Database, DuplicateError, get_db
from .deps import get_clock, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


def get_dashboard_manager(
    db: Database = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> DashboardManager:
    """Dependency to get dashboard manager."""
    return DashboardManager(db, window_days=settings.registration_window_days, clock=clock)


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Admin overview",
    description="""
Totals for users and links plus the daily registration series.

The series covers every day from `window_start` to `window_end`
inclusive (31 entries for the default 30-day window). Days without
registrations have a count of 0.
""",
)
async def get_dashboard(
    context: RequestContext = Depends(require_admin),
    manager: DashboardManager = Depends(get_dashboard_manager),
) -> DashboardResponse:
    """Get the admin dashboard."""
    try:
        return await manager.get_overview()
    except Exception as e:
        logger.error(f"Error building dashboard: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/dashboard/user/{user_id}", response_model=UserResponse, summary="Get a user")
async def get_user(
    user_id: UUID,
    context: RequestContext = Depends(require_admin),
    db: Database = Depends(get_db),
) -> UserResponse:
    """Get any user with their links."""
    try:
        row = await db.get_user(str(user_id), with_links=True)
        if not row:
            raise HTTPException(status_code=404, detail="User not found")

        return UserResponse(message="User fetched by id successfully", user=User(**row))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting user: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/dashboard/user/{user_id}", response_model=UserResponse, summary="Update a user")
async def update_user(
    user_id: UUID,
    request: UserUpdateRequest,
    context: RequestContext = Depends(require_admin),
    db: Database = Depends(get_db),
) -> UserResponse:
    """Update name, username, email or role of any user."""
    try:
        updated = await db.update_user(str(user_id), **request.model_dump(exclude_none=True))
        if not updated:
            raise HTTPException(status_code=404, detail="User not found")

        logger.info(f"Admin {context.user_id} updated user {user_id}")
        return UserResponse(message="User updated successfully", user=User(**updated))

    except DuplicateError as e:
        raise HTTPException(
            status_code=409,
            detail=f"{e.field.capitalize()} already in use, try with another {e.field}",
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating user: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.delete(
    "/dashboard/user/{user_id}",
    response_model=UserDeletedResponse,
    summary="Delete a user",
    description="Delete a user and all of their links. This cannot be undone!",
)
async def delete_user(
    user_id: UUID,
    context: RequestContext = Depends(require_admin),
    db: Database = Depends(get_db),
) -> UserDeletedResponse:
    """Delete any user."""
    try:
        deleted, deleted_links = await db.delete_user(str(user_id))
        if not deleted:
            raise HTTPException(status_code=404, detail="User not found")

        logger.info(f"Admin {context.user_id} deleted user {user_id}")
        return UserDeletedResponse(
            message="User and associated data deleted successfully",
            deleted_user=User(**deleted),
            deleted_links_count=deleted_links,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting user: {e}")
        raise HTTPException(status_code=500, detail=str(e))
