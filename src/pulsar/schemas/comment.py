# src/pulsar/schemas/comment.py
"""Comment and reply schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from pulsar.schemas.common import CamelModel
from pulsar.schemas.user import UserSummary


class CommentCreate(CamelModel):
    """Body of both "add comment" and "reply to comment"."""

    content: str = Field(..., max_length=5000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment content is required")
        return v


class ReplyView(CamelModel):
    """Projected reply; `parent_id` is the owning top-level comment."""

    id: str
    author: UserSummary | None
    content: str
    parent_id: str | None = None
    likes: int
    dislikes: int
    is_liked: bool = False
    is_disliked: bool = False
    created_at: datetime


class CommentView(ReplyView):
    """Projected top-level comment with its replies."""

    replies: list[ReplyView] = []


class CommentCreatedResponse(CamelModel):
    message: str
    comment: CommentView


class ReplyCreatedResponse(CamelModel):
    message: str
    reply: ReplyView


class SentimentResponse(CamelModel):
    """Counts after a like/dislike toggle on a comment or reply."""

    message: str
    likes: int
    dislikes: int
    is_liked: bool
    is_disliked: bool
