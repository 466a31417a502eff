# src/pulsar/models/post.py
"""SQLAlchemy models for posts and their engagement collections."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Column,
    ForeignKey,
    Index,
    Integer,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from pulsar.db.session import Base
from pulsar.models.time import CreatedAtMixin, UTCDateTime, utcnow
from pulsar.models.user import User

# Composite primary keys keep each user at most once per set.
post_like_table = Table(
    "post_like",
    Base.metadata,
    Column("post_id", Integer, ForeignKey("post.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "user_id",
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

post_repost_table = Table(
    "post_repost",
    Base.metadata,
    Column("post_id", Integer, ForeignKey("post.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "user_id",
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Post(CreatedAtMixin, Base):
    """Primary content entity produced by users.

    The comment thread is stored inline as a JSON document: comments are
    owned by the post and are only ever addressed through it. See
    `pulsar.services.threads` for the typed view over that document.
    """

    __tablename__ = "post"
    __table_args__ = (
        Index("ix_post_created_at", "created_at"),
        Index("ix_post_author_created_at", "author_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # Opaque image reference (data URI or URL); empty when absent.
    image: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
    )
    comments: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    author: Mapped[User] = relationship("User", lazy="joined")
    likes: Mapped[list[User]] = relationship("User", secondary=post_like_table)
    reposts: Mapped[list[User]] = relationship("User", secondary=post_repost_table)

    @validates("author_id")
    def _author_is_immutable(self, key: str, value: int) -> int:
        if self.author_id is not None and value != self.author_id:
            raise ValueError("Post author cannot be changed")
        return value

    def __repr__(self) -> str:
        return f"<Post id={self.id} author_id={self.author_id}>"
