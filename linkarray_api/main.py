"""Main FastAPI application for the linkarray service."""

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import (
    admin_router,
    auth_router,
    health_router,
    links_router,
    register_exception_handlers,
    users_router,
)
from .config import settings
from .middleware import ApiKeyMiddleware, RequestLoggingMiddleware
from .storage import init_database

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup and shutdown."""
    logger.info("Starting linkarray service...")
    logger.info(f"Service version: {app.version} ({settings.environment})")
    logger.info(f"Host: {settings.service_host}:{settings.service_port}")

    db = await init_database()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down linkarray service...")
    await db.disconnect()
    logger.info("linkarray service stopped")


app = FastAPI(
    title="linkarray API",
    description="""
REST API for a personal link-sharing service.

## Endpoints

### Auth
- `POST /api/v1/auth/signup` - Register and log in
- `POST /api/v1/auth/login` - Log in
- `POST /api/v1/auth/logout` - Clear the session cookie

### Users
- `GET /api/v1/user/profile` - Own profile with links
- `DELETE /api/v1/user/profile` - Delete own account
- `GET /api/v1/user/{username}` - Public profile

### Links
- `POST /api/v1/link/addlink` - Add a link
- `GET /api/v1/link/getlinks` - List own links
- `PUT /api/v1/link/{id}` - Update a link
- `DELETE /api/v1/link/{id}` - Delete a link

### Admin
- `GET /api/v1/admin/dashboard` - Totals and 30-day registration chart
- `GET|PUT|DELETE /api/v1/admin/dashboard/user/{id}` - Manage a user

Sessions are one-hour signed tokens carried in an HTTP-only `token` cookie
(or an `Authorization: Bearer` header). In production every `/api/` call
also needs the `linkarray-api-key` header.
""",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

register_exception_handlers(app)

# API key gate
app.add_middleware(ApiKeyMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Access logging (outermost)
app.add_middleware(RequestLoggingMiddleware)

# Register routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(links_router)
app.include_router(admin_router)


def main() -> None:
    """Main entry point for running the service."""
    import uvicorn

    uvicorn.run(
        "linkarray_api.main:app",
        host=settings.service_host,
        port=settings.service_port,
        workers=settings.service_workers,
        log_level=settings.log_level,
        reload=False,
    )


if __name__ == "__main__":
    main()
