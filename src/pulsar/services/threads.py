"""Typed view over a post's embedded comment thread and its mutation rules.

A post stores its comments as a JSON document. Every mutation loads that
document into `Comment`/`Reply` models, finds the target element by id,
changes the in-memory copy, and writes the whole list back to the post.

Threads are exactly two levels deep. `Reply` has no ``replies`` field and
forbids unknown keys, so a reply-of-a-reply cannot be represented, let alone
stored. A request to reply to a reply is attached to the top-level comment
that owns the addressed reply.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm.attributes import flag_modified

from pulsar.core.errors import NotFoundError
from pulsar.models import Post
from pulsar.models.time import utcnow
from pulsar.services.engagement import toggle_membership

logger = logging.getLogger(__name__)

Sentiment = Literal["like", "dislike"]
CommentOrder = Literal["newest", "oldest", "best"]

__all__ = [
    "Comment",
    "CommentOrder",
    "Reply",
    "Sentiment",
    "add_comment",
    "add_reply",
    "find_entry",
    "load_thread",
    "react",
    "save_thread",
    "sort_comments",
    "toggle_sentiment",
]


def _new_id() -> str:
    return uuid.uuid4().hex


class _ThreadEntry(BaseModel):
    """Fields shared by comments and replies."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=_new_id)
    author_id: int
    content: str
    likes: list[int] = Field(default_factory=list)
    dislikes: list[int] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def score(self) -> int:
        """Net sentiment used by the ``best`` ordering."""
        return len(self.likes) - len(self.dislikes)


class Reply(_ThreadEntry):
    """Second-level entry; cannot hold replies of its own."""


class Comment(_ThreadEntry):
    """Top-level entry on a post."""

    # Kept for document compatibility; top-level comments never set it.
    parent_id: str | None = None
    replies: list[Reply] = Field(default_factory=list)


def load_thread(post: Post) -> list[Comment]:
    """Parse the post's stored comment documents, in storage order."""
    return [Comment.model_validate(doc) for doc in post.comments or []]


def save_thread(post: Post, comments: list[Comment]) -> None:
    """Write `comments` back onto the post as JSON documents."""
    post.comments = [comment.model_dump(mode="json") for comment in comments]
    flag_modified(post, "comments")


def find_entry(comments: list[Comment], entry_id: str) -> tuple[Comment, Reply | None]:
    """Locate a comment or reply by id.

    Returns:
        ``(comment, None)`` when `entry_id` names a top-level comment, or
        ``(owning_comment, reply)`` when it names a reply.

    Raises:
        NotFoundError: If no comment or reply has that id.
    """
    for comment in comments:
        if comment.id == entry_id:
            return comment, None
        for reply in comment.replies:
            if reply.id == entry_id:
                return comment, reply
    raise NotFoundError("Comment not found")


def add_comment(post: Post, author_id: int, content: str) -> Comment:
    """Append a new top-level comment to the post."""
    comments = load_thread(post)
    comment = Comment(author_id=author_id, content=content)
    comments.append(comment)
    save_thread(post, comments)
    return comment


def add_reply(post: Post, comment_id: str, author_id: int, content: str) -> tuple[Comment, Reply]:
    """Append a reply under the top-level comment addressed by `comment_id`.

    If `comment_id` names a reply, the new reply goes to that reply's owning
    comment.
    """
    comments = load_thread(post)
    comment, addressed_reply = find_entry(comments, comment_id)
    if addressed_reply is not None:
        logger.debug(
            "Reply to reply %s on post %s attached to comment %s",
            comment_id,
            post.id,
            comment.id,
        )
    reply = Reply(author_id=author_id, content=content)
    comment.replies.append(reply)
    save_thread(post, comments)
    return comment, reply


def toggle_sentiment(entry: Comment | Reply, user_id: int, sentiment: Sentiment) -> bool:
    """Toggle `user_id` in the entry's like or dislike set.

    The user is first removed from the opposing set, so a user never likes
    and dislikes the same entry at once.

    Returns:
        True if the user holds `sentiment` on the entry afterwards.
    """
    if sentiment == "like":
        target, opposing = entry.likes, entry.dislikes
    else:
        target, opposing = entry.dislikes, entry.likes
    if user_id in opposing:
        opposing.remove(user_id)
    return toggle_membership(target, user_id)


def react(post: Post, entry_id: str, user_id: int, sentiment: Sentiment) -> Comment | Reply:
    """Apply a like/dislike toggle to a comment or reply and store the thread."""
    comments = load_thread(post)
    comment, reply = find_entry(comments, entry_id)
    entry: Comment | Reply = reply if reply is not None else comment
    toggle_sentiment(entry, user_id, sentiment)
    save_thread(post, comments)
    return entry


def sort_comments(comments: list[Comment], order: CommentOrder = "oldest") -> list[Comment]:
    """Return `comments` in display order without touching storage order.

    All orderings are stable, so ties keep insertion order.
    """
    if order == "oldest":
        return list(comments)
    if order == "newest":
        return sorted(comments, key=lambda c: c.created_at, reverse=True)
    if order == "best":
        return sorted(comments, key=lambda c: c.score, reverse=True)
    raise ValueError(f"Unknown comment order: {order}")
