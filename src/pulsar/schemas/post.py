# src/pulsar/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from pulsar.schemas.comment import CommentView
from pulsar.schemas.common import CamelModel, Pagination
from pulsar.schemas.user import UserSummary

MAX_POST_LENGTH = 5000


def _clean_content(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Post content is required")
    if len(v) > MAX_POST_LENGTH:
        raise ValueError(f"Post content must be at most {MAX_POST_LENGTH} characters")
    return v


class PostCreate(CamelModel):
    """Schema for creating a new post."""

    content: str = Field(..., description="Post text, trimmed")
    image: str | None = Field(None, description="Optional image reference (data URI or URL)")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _clean_content(v)


class PostUpdate(CamelModel):
    """Schema for editing a post; only content and image can change."""

    content: str | None = None
    image: str | None = None

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _clean_content(v)


class PostSummary(CamelModel):
    """Feed projection: engagement collections are reduced to counts."""

    id: int
    author: UserSummary
    content: str
    image: str
    created_at: datetime
    likes: int
    comments: int
    reposts: int
    is_liked: bool = False


class PostDetail(PostSummary):
    """Single-post projection carrying the full comment thread."""

    comments: list[CommentView]  # type: ignore[assignment]


class FeedResponse(CamelModel):
    posts: list[PostSummary]
    pagination: Pagination


class UserPostsResponse(CamelModel):
    posts: list[PostSummary]


class PostDetailResponse(CamelModel):
    post: PostDetail


class PostMutationResponse(CamelModel):
    message: str
    post: PostSummary


class LikeResponse(CamelModel):
    message: str
    likes: int
    is_liked: bool


class RepostResponse(CamelModel):
    message: str
    reposts: int
    is_reposted: bool
