# src/pulsar/models/__init__.py
"""SQLAlchemy models for the Pulsar application."""

from .post import Post, post_like_table, post_repost_table
from .user import User, follow_table

__all__ = [
    "Post", "post_like_table", "post_repost_table",
    "User", "follow_table",
]
