"""Data models for the linkarray service."""

from .analytics import DailyCount
from .link import Link, LinkCreateRequest, LinkUpdateRequest
from .responses import (
    AuthResponse,
    DashboardResponse,
    HealthResponse,
    LinkListResponse,
    LinkResponse,
    MessageResponse,
    PublicProfileResponse,
    UserDeletedResponse,
    UserResponse,
    VersionResponse,
)
from .user import (
    LoginRequest,
    PublicProfile,
    Role,
    SignupRequest,
    User,
    UserUpdateRequest,
)

__all__ = [
    # User models
    "Role",
    "User",
    "PublicProfile",
    "SignupRequest",
    "LoginRequest",
    "UserUpdateRequest",
    # Link models
    "Link",
    "LinkCreateRequest",
    "LinkUpdateRequest",
    # Analytics models
    "DailyCount",
    # Response models
    "AuthResponse",
    "MessageResponse",
    "UserResponse",
    "PublicProfileResponse",
    "UserDeletedResponse",
    "LinkResponse",
    "LinkListResponse",
    "DashboardResponse",
    "HealthResponse",
    "VersionResponse",
]
