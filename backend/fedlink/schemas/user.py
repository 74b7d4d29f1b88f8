"""User Schemas — identity claims, profile edits and public user views.

Invariants:
    - username: 3-64 chars, letters/digits/underscore/dot/dash
    - Federation identity fields are never client-writable
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

USERNAME_PATTERN = r"^[A-Za-z0-9_.-]{3,64}$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class IdentityClaims(BaseModel):
    """Claims handed over by the identity provider at login."""
    username: str = Field(pattern=USERNAME_PATTERN)
    email: str | None = Field(None, pattern=EMAIL_PATTERN, max_length=320)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=2000)
    profile_image_url: str | None = Field(None, max_length=2000)

    def resolved_email(self) -> str:
        return self.email or f"{self.username}@example.com"


class UserCreate(BaseModel):
    username: str = Field(pattern=USERNAME_PATTERN)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=320)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=2000)
    headline: str | None = Field(None, max_length=200)
    profile_image_url: str | None = Field(None, max_length=2000)


class UserUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: str | None = Field(None, pattern=USERNAME_PATTERN)
    email: str | None = Field(None, pattern=EMAIL_PATTERN, max_length=320)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=2000)
    headline: str | None = Field(None, max_length=200)
    profile_image_url: str | None = Field(None, max_length=2000)

    @field_validator("username", "email")
    @classmethod
    def not_null(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("cannot be null")
        return v


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    first_name: str | None = None
    last_name: str | None = None
    headline: str | None = None
    profile_image_url: str | None = None


class UserResponse(UserSummary):
    email: str
    bio: str | None = None
    activity_pub_id: str | None = None
    actor_url: str | None = None
    inbox_url: str | None = None
    outbox_url: str | None = None
    created_at: datetime
