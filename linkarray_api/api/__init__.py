"""API endpoints for the linkarray service."""

from .admin import router as admin_router
from .auth import router as auth_router
from .errors import register_exception_handlers
from .health import router as health_router
from .links import router as links_router
from .users import router as users_router

__all__ = [
    "admin_router",
    "auth_router",
    "health_router",
    "links_router",
    "users_router",
    "register_exception_handlers",
]
