"""Health check and version endpoints."""

import logging
import time
from typing import Any

from fastapi import APIRouter, Depends

from .. import __version__
from ..config import settings
from ..models import HealthResponse, VersionResponse
from ..storage import Database, get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

# Track service start time
_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check(db: Database = Depends(get_db)) -> HealthResponse:
    """Health check endpoint."""
    uptime = time.time() - _start_time

    # Check database connectivity
    db_connected = False
    try:
        await db.count_users()
        db_connected = True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")

    days, remainder = divmod(int(uptime), 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)

    return HealthResponse(
        status="healthy" if db_connected else "degraded",
        version=__version__,
        uptime=f"Days: {days}, Hours: {hours}, Minutes: {minutes}, Seconds: {seconds}",
        database_connected=db_connected,
    )


@router.get("/version", response_model=VersionResponse)
async def get_version() -> VersionResponse:
    """Get version information."""
    return VersionResponse(service_version=__version__, environment=settings.environment)


@router.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with service information."""
    return {
        "service": "linkarray API",
        "version": __version__,
        "description": "Backend for the linkarray personal link-sharing platform",
        "docs": "/docs",
        "health": "/health",
    }
