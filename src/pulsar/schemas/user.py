"""User-related Pydantic schemas."""

import re
from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from pulsar.schemas.common import CamelModel

USERNAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_]*$")


class RegisterRequest(CamelModel):
    """Schema for account registration."""

    email: EmailStr = Field(..., description="Email address, case-insensitive")
    username: str = Field(..., min_length=3, max_length=20, description="Unique handle")
    display_name: str = Field(..., min_length=2, max_length=50)
    password: str = Field(..., min_length=6, description="Plain-text password (min 6 chars)")

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        """Addresses are stored trimmed and lower-cased."""
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Handles start with a letter and contain only letters, digits and underscores."""
        v = v.strip()
        if not USERNAME_PATTERN.match(v):
            raise ValueError(
                "Username must start with a letter and contain only letters, digits and _"
            )
        return v.lower()

    @field_validator("display_name", mode="before")
    @classmethod
    def strip_display_name(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v


class LoginRequest(CamelModel):
    """Schema for login submissions."""

    email_or_username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ProfileUpdateRequest(CamelModel):
    """Partial profile update; omitted fields are left untouched."""

    display_name: str | None = Field(None, max_length=50)
    bio: str | None = Field(None, max_length=160)
    location: str | None = Field(None, max_length=100)
    avatar: str | None = None

    @field_validator("display_name", mode="before")
    @classmethod
    def strip_display_name(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v: str | None) -> str | None:
        # An empty display name means "keep the current one".
        if v is None or v == "":
            return None
        if len(v) < 2:
            raise ValueError("Display name must be at least 2 characters")
        return v


class UserSummary(CamelModel):
    """Minimal author card embedded in posts, comments and follow lists."""

    id: int
    username: str
    display_name: str
    avatar: str


class PublicUser(UserSummary):
    """The caller's own account as returned by auth and profile endpoints."""

    email: str
    bio: str
    location: str


class UserProfile(UserSummary):
    """Another user's profile as seen by the (optional) viewer."""

    bio: str
    location: str
    followers_count: int
    following_count: int
    created_at: datetime
    is_following: bool = False


class AuthResponse(CamelModel):
    """Response returned by register and login."""

    message: str
    token: str
    user: PublicUser


class MeResponse(CamelModel):
    user: PublicUser


class ProfileResponse(CamelModel):
    user: UserProfile


class ProfileUpdateResponse(CamelModel):
    message: str
    user: PublicUser


class FollowResponse(CamelModel):
    message: str
    is_following: bool


class FollowersResponse(CamelModel):
    followers: list[UserSummary]


class FollowingResponse(CamelModel):
    following: list[UserSummary]
