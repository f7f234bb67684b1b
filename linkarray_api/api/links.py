"""Link management endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..core import RequestContext
from ..models import Link, LinkCreateRequest, LinkListResponse, LinkResponse, LinkUpdateRequest
from ..storage import Database, get_db
from .deps import get_request_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/link", tags=["links"])


async def _get_owned_link(db: Database, link_id: str, user_id: str) -> dict:
    """Fetch a link the caller owns, or 404."""
    link = await db.get_link(link_id)
    if not link or link["user_id"] != user_id:
        raise HTTPException(status_code=404, detail="Link not found")
    return link


@router.post("/addlink", response_model=LinkResponse, status_code=201, summary="Add a link")
async def add_link(
    request: LinkCreateRequest,
    context: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
) -> LinkResponse:
    """Add a link to the caller's collection."""
    try:
        row = await db.create_link(context.user_id, request.title, request.url)
        logger.info(f"Link created for user {context.user_id}: {row['id']}")
        return LinkResponse(message="Link created successfully", link=Link(**row))

    except Exception as e:
        logger.error(f"Error creating link: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Something went wrong")


@router.get("/getlinks", response_model=LinkListResponse, summary="List own links")
async def get_links(
    context: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
) -> LinkListResponse:
    """List all links of the caller, visible or not."""
    try:
        rows = await db.list_links(context.user_id)
        return LinkListResponse(
            message="Links fetched successfully", links=[Link(**row) for row in rows]
        )

    except Exception as e:
        logger.error(f"Error listing links: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put(
    "/{link_id}",
    response_model=LinkResponse,
    summary="Update a link",
    description="Change the title, URL or visibility of one of the caller's links.",
)
async def update_link(
    link_id: str,
    request: LinkUpdateRequest,
    context: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
) -> LinkResponse:
    """Update a link owned by the caller."""
    try:
        link = await _get_owned_link(db, link_id, context.user_id)

        changes = {
            field: value
            for field, value in request.model_dump(exclude_none=True).items()
            if link[field] != value
        }
        if not changes:
            raise HTTPException(status_code=400, detail="Values are exactly same")

        updated = await db.update_link(link_id, **changes)
        if not updated:
            raise HTTPException(status_code=404, detail="Link not found")

        logger.info(f"Link updated: {link_id} ({', '.join(sorted(changes))})")
        return LinkResponse(message="Link updated successfully", link=Link(**updated))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating link: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{link_id}", response_model=LinkResponse, summary="Delete a link")
async def delete_link(
    link_id: str,
    context: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
) -> LinkResponse:
    """Delete a link owned by the caller."""
    try:
        await _get_owned_link(db, link_id, context.user_id)

        deleted = await db.delete_link(link_id)
        if not deleted:
            raise HTTPException(status_code=404, detail="Link not found")

        logger.info(f"Link deleted: {link_id}")
        return LinkResponse(message="Link deleted successfully", link=Link(**deleted))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting link: {e}")
        raise HTTPException(status_code=500, detail=str(e))
