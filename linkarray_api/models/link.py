"""Link data models."""

from datetime import datetime
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator


def clean_title(value: str) -> str:
    """Trim a link title and enforce its length bounds."""
    value = value.strip()
    if len(value) < 3:
        raise ValueError("Title must be at least 3 characters long")
    if len(value) > 50:
        raise ValueError("Title must be 50 characters or less")
    return value


def validate_https_url(value: str) -> str:
    """Require an absolute https URL with a dotted host name."""
    value = value.strip()
    parsed = urlparse(value)
    if parsed.scheme != "https" or not parsed.hostname or "." not in parsed.hostname:
        raise ValueError("Please provide a valid HTTPS URL")
    return value


class Link(BaseModel):
    """A link curated by a user."""

    id: str
    user_id: str
    title: str
    url: str
    is_visible: bool = True
    created_at: datetime
    updated_at: datetime


class LinkCreateRequest(BaseModel):
    """Request to add a link."""

    title: str = Field(..., description="Link title", examples=["My portfolio"])
    url: str = Field(..., description="Absolute https URL", examples=["https://example.com"])

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        return clean_title(value)

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        return validate_https_url(value)


class LinkUpdateRequest(BaseModel):
    """Request to update a link. Omitted fields are left unchanged."""

    title: str | None = None
    url: str | None = None
    is_visible: bool | None = None

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str | None) -> str | None:
        return clean_title(value) if value is not None else None

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str | None) -> str | None:
        return validate_https_url(value) if value is not None else None
