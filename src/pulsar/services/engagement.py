"""Toggle rules for likes, reposts and the follow graph."""
from __future__ import annotations

import logging
from collections.abc import MutableSequence
from typing import TypeVar

from sqlalchemy.orm import Session

from pulsar.core.errors import ValidationError
from pulsar.models import Post, User

logger = logging.getLogger(__name__)

T = TypeVar("T")

__all__ = [
    "toggle_membership",
    "toggle_post_like",
    "toggle_repost",
    "toggle_follow",
]


def toggle_membership(members: MutableSequence[T], member: T) -> bool:
    """Remove `member` if present, otherwise append it.

    Works on plain id lists as well as ORM relationship collections.

    Returns:
        True if `member` is in the collection afterwards.
    """
    if member in members:
        members.remove(member)
        return False
    members.append(member)
    return True


def toggle_post_like(db: Session, post: Post, user: User) -> tuple[int, bool]:
    """Like or un-like `post`; return the new like count and the caller's state."""
    liked = toggle_membership(post.likes, user)
    count = len(post.likes)
    db.commit()
    return count, liked


def toggle_repost(db: Session, post: Post, user: User) -> tuple[int, bool]:
    """Repost or un-repost `post`; return the new repost count and the caller's state."""
    reposted = toggle_membership(post.reposts, user)
    count = len(post.reposts)
    db.commit()
    return count, reposted


def toggle_follow(db: Session, actor: User, target: User) -> bool:
    """Follow `target` if `actor` does not already, otherwise unfollow.

    Both `actor.following` and `target.followers` are views of the same
    association row, so they change together in a single commit.

    Raises:
        ValidationError: If `actor` and `target` are the same user. Nothing
            is written in that case.
    """
    if actor.id == target.id:
        raise ValidationError("You cannot follow yourself")

    following = toggle_membership(actor.following, target)
    db.commit()
    logger.info(
        "User %s %s user %s",
        actor.id,
        "followed" if following else "unfollowed",
        target.id,
    )
    return following
