# src/pulsar/models/user.py
"""SQLAlchemy models for user identities and the follow graph."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pulsar.db.session import Base
from pulsar.models.time import CreatedAtMixin

# One row per edge: (follower follows followed). Both `User.following` and
# `User.followers` read the same row, so the two sides cannot drift apart.
follow_table = Table(
    "follow",
    Base.metadata,
    Column(
        "follower_id",
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "followed_id",
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class User(CreatedAtMixin, Base):
    """Registered identity with a unique email and handle."""

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Both stored lower-cased; uniqueness is therefore case-insensitive.
    email: Mapped[str] = mapped_column(String(254), unique=True, nullable=False)
    username: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(50), nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    avatar: Mapped[str] = mapped_column(Text, nullable=False, default="")
    bio: Mapped[str] = mapped_column(String(160), nullable=False, default="")
    location: Mapped[str] = mapped_column(Text, nullable=False, default="")

    following: Mapped[list[User]] = relationship(
        "User",
        secondary=follow_table,
        primaryjoin=lambda: User.id == follow_table.c.follower_id,
        secondaryjoin=lambda: User.id == follow_table.c.followed_id,
        back_populates="followers",
    )
    followers: Mapped[list[User]] = relationship(
        "User",
        secondary=follow_table,
        primaryjoin=lambda: User.id == follow_table.c.followed_id,
        secondaryjoin=lambda: User.id == follow_table.c.follower_id,
        back_populates="following",
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"
