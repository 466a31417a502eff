"""Data access helpers for working with posts."""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from pulsar.models.post import Post

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: int) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def list_recent(self, *, offset: int, limit: int) -> list[Post]:
        """Return a page of posts, newest first.

        Engagement collections are loaded up front because every feed item
        reports their sizes.
        """
        stmt = (
            select(Post)
            .options(selectinload(Post.likes), selectinload(Post.reposts))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def count(self) -> int:
        """Return the total number of posts."""
        return int(self.session.scalar(select(func.count()).select_from(Post)) or 0)

    def list_by_author(self, author_id: int) -> list[Post]:
        """Return every post written by `author_id`, newest first."""
        stmt = (
            select(Post)
            .where(Post.author_id == author_id)
            .options(selectinload(Post.likes), selectinload(Post.reposts))
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        return list(self.session.scalars(stmt))

    def create(self, *, author_id: int, content: str, image: str) -> Post:
        """Insert a new post and return the persisted ORM instance."""
        post = Post(author_id=author_id, content=content, image=image, comments=[])
        self.session.add(post)
        self.session.flush()
        return post

    def delete(self, post: Post) -> None:
        """Delete a post; its thread and engagement rows go with it."""
        self.session.delete(post)
        self.session.flush()
