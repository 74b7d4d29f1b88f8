"""Feed Schemas — posts, comments, reactions."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fedlink.core.domain_types import ReactionType
from fedlink.schemas.user import UserSummary


class PostCreate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)
    media_url: str | None = Field(None, max_length=2000)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content cannot be empty or whitespace")
        return v


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    content: str
    media_url: str | None
    activity_id: str | None
    created_at: datetime
    user: UserSummary


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=2000)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content cannot be empty or whitespace")
        return v


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    user_id: int
    content: str
    created_at: datetime
    user: UserSummary


class ReactionSet(BaseModel):
    type: ReactionType


class ReactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    user_id: int
    type: str
    created_at: datetime
