"""Service-level helpers for creating, editing and deleting posts."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from pulsar.core.errors import NotFoundError, PermissionDeniedError
from pulsar.models.post import Post
from pulsar.models.time import utcnow
from pulsar.models.user import User
from pulsar.repositories.post_repo import PostRepository
from pulsar.schemas.post import PostCreate, PostUpdate

logger = logging.getLogger(__name__)


def get_post_or_404(db: Session, post_id: int) -> Post:
    """Return a post by id or raise `NotFoundError`."""
    post = PostRepository(db).get_by_id(post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def ensure_author(post: Post, user: User, action: str) -> None:
    """Raise `PermissionDeniedError` unless `user` wrote `post`."""
    if post.author_id != user.id:
        raise PermissionDeniedError(f"You are not allowed to {action} this post")


def create_post(db: Session, author: User, post_data: PostCreate) -> Post:
    """Publish a new post for `author`."""
    post = PostRepository(db).create(
        author_id=author.id,
        content=post_data.content,
        image=post_data.image or "",
    )
    db.commit()
    db.refresh(post)
    logger.info("User %s created post %s", author.id, post.id)
    return post


def update_post(db: Session, post: Post, user: User, post_data: PostUpdate) -> Post:
    """Edit the content and/or image of a post owned by `user`."""
    ensure_author(post, user, "edit")
    if post_data.content is not None:
        post.content = post_data.content
    if post_data.image is not None:
        post.image = post_data.image
    post.updated_at = utcnow()
    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, post: Post, user: User) -> None:
    """Delete a post owned by `user` along with its thread and engagement."""
    ensure_author(post, user, "delete")
    post_id = post.id
    PostRepository(db).delete(post)
    db.commit()
    logger.info("User %s deleted post %s", user.id, post_id)
