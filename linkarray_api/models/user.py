"""User data models."""

import re
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, EmailStr, Field, field_validator

from .link import Link

USERNAME_PATTERN = re.compile(r"^(?=.*[a-zA-Z])[a-zA-Z0-9]+$")
SPECIAL_CHARACTERS = "!@#$%^&*"

# bcrypt only accepts this many bytes of input
MAX_PASSWORD_BYTES = 72


class Role(str, Enum):
    """Closed set of account roles."""

    ADMIN = "admin"
    USER = "user"
    GUEST = "guest"


def check_password_bytes(value: str) -> str:
    """Reject passwords whose UTF-8 encoding exceeds the bcrypt input limit."""
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
    return value


def validate_username(value: str) -> str:
    """Check the username rules shared by signup, updates and public lookups."""
    if len(value) < 3:
        raise ValueError("Username must be at least 3 characters long")
    if not USERNAME_PATTERN.match(value):
        raise ValueError(
            "Username must contain at least one letter and can include numbers, "
            "but cannot consist solely of numbers"
        )
    return value


class User(BaseModel):
    """Registered account as exposed by the API (never includes the password hash)."""

    model_config = {"use_enum_values": True}

    id: str
    name: str
    username: str
    email: str
    role: Role = Role.USER
    created_at: datetime
    updated_at: datetime
    links: list[Link] = Field(default_factory=list)


class PublicProfile(BaseModel):
    """Publicly visible part of a user's profile."""

    name: str
    username: str
    links: list[Link] = Field(default_factory=list)


class SignupRequest(BaseModel):
    """Request to register a new account."""

    name: str = Field(..., min_length=2, description="Display name")
    username: str = Field(..., description="Unique handle used for the public profile")
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters long")
        return value

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        return validate_username(value)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value: str) -> str:
        if not any(ch.isdigit() for ch in value):
            raise ValueError("Password must contain at least one number")
        if not any(ch in SPECIAL_CHARACTERS for ch in value):
            raise ValueError("Password must contain at least one special character")
        return check_password_bytes(value)


class LoginRequest(BaseModel):
    """Request to log in with email and password."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def check_password_length(cls, value: str) -> str:
        return check_password_bytes(value)


class UserUpdateRequest(BaseModel):
    """Admin request to update an account. Omitted fields are left unchanged."""

    model_config = {"use_enum_values": True}

    name: str | None = Field(default=None, min_length=2)
    username: str | None = None
    email: EmailStr | None = None
    role: Role | None = None

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str | None) -> str | None:
        return validate_username(value) if value is not None else None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        return value.lower() if value is not None else None
