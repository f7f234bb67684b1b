"""Response models for API endpoints."""

from datetime import date

from pydantic import BaseModel, Field

from .analytics import DailyCount
from .link import Link
from .user import PublicProfile, User


class AuthResponse(BaseModel):
    """Response for signup and login."""

    message: str
    token: str
    user: User | None = None


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class UserResponse(BaseModel):
    """Response carrying a single user."""

    message: str
    user: User


class PublicProfileResponse(BaseModel):
    """Response for public profile lookups."""

    message: str
    user: PublicProfile


class UserDeletedResponse(BaseModel):
    """Response after an account and its links were removed."""

    message: str
    deleted_user: User
    deleted_links_count: int


class LinkResponse(BaseModel):
    """Response carrying a single link."""

    message: str
    link: Link


class LinkListResponse(BaseModel):
    """Response for listing links."""

    message: str
    links: list[Link] = Field(default_factory=list)


class DashboardResponse(BaseModel):
    """Admin dashboard overview."""

    message: str
    users_count: int
    links_count: int
    window_start: date
    window_end: date
    registrations: list[DailyCount]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    uptime: str
    database_connected: bool


class VersionResponse(BaseModel):
    """Version information response."""

    service_version: str
    environment: str
