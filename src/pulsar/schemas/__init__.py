# src/pulsar/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentView, ReplyView
from .post import PostCreate, PostDetail, PostSummary, PostUpdate
from .user import LoginRequest, ProfileUpdateRequest, RegisterRequest, UserSummary

__all__ = [
    "CommentCreate", "CommentView", "ReplyView",
    "PostCreate", "PostDetail", "PostSummary", "PostUpdate",
    "LoginRequest", "ProfileUpdateRequest", "RegisterRequest", "UserSummary",
]
