"""Read-model projection: stored records to response shapes.

Engagement collections leave the API as counts plus viewer-relative flags
(``isLiked``, ``isDisliked``). Author ids stored in comment threads are
expanded to user summaries with one query per thread.
"""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.orm import Session

from pulsar.models import Post, User
from pulsar.schemas.comment import CommentView, ReplyView
from pulsar.schemas.post import PostDetail, PostSummary
from pulsar.schemas.user import PublicUser, UserProfile, UserSummary
from pulsar.services.threads import Comment, CommentOrder, Reply, load_thread, sort_comments


def user_summary(user: User) -> UserSummary:
    return UserSummary.model_validate(user)


def public_user(user: User) -> PublicUser:
    return PublicUser.model_validate(user)


def user_profile(user: User, viewer: User | None = None) -> UserProfile:
    """Profile card with follow counts and whether `viewer` follows the user."""
    is_following = viewer is not None and any(u.id == user.id for u in viewer.following)
    return UserProfile(
        id=user.id,
        username=user.username,
        display_name=user.display_name,
        avatar=user.avatar,
        bio=user.bio,
        location=user.location,
        followers_count=len(user.followers),
        following_count=len(user.following),
        created_at=user.created_at,
        is_following=is_following,
    )


def _is_member(users: Iterable[User], viewer_id: int | None) -> bool:
    return viewer_id is not None and any(u.id == viewer_id for u in users)


def post_summary(post: Post, viewer_id: int | None = None) -> PostSummary:
    """Project a post for feeds and mutation responses."""
    return PostSummary(
        id=post.id,
        author=user_summary(post.author),
        content=post.content,
        image=post.image,
        created_at=post.created_at,
        likes=len(post.likes),
        comments=len(post.comments or []),
        reposts=len(post.reposts),
        is_liked=_is_member(post.likes, viewer_id),
    )


def load_authors(db: Session, comments: Iterable[Comment]) -> dict[int, UserSummary]:
    """Fetch every author referenced by `comments` and their replies."""
    author_ids: set[int] = set()
    for comment in comments:
        author_ids.add(comment.author_id)
        author_ids.update(reply.author_id for reply in comment.replies)
    if not author_ids:
        return {}
    users = db.query(User).filter(User.id.in_(author_ids)).all()
    return {user.id: user_summary(user) for user in users}


def reply_view(
    reply: Reply,
    parent: Comment,
    authors: dict[int, UserSummary],
    viewer_id: int | None = None,
) -> ReplyView:
    return ReplyView(
        id=reply.id,
        author=authors.get(reply.author_id),
        content=reply.content,
        parent_id=parent.id,
        likes=len(reply.likes),
        dislikes=len(reply.dislikes),
        is_liked=viewer_id is not None and viewer_id in reply.likes,
        is_disliked=viewer_id is not None and viewer_id in reply.dislikes,
        created_at=reply.created_at,
    )


def comment_view(
    comment: Comment,
    authors: dict[int, UserSummary],
    viewer_id: int | None = None,
) -> CommentView:
    return CommentView(
        id=comment.id,
        author=authors.get(comment.author_id),
        content=comment.content,
        parent_id=comment.parent_id,
        likes=len(comment.likes),
        dislikes=len(comment.dislikes),
        is_liked=viewer_id is not None and viewer_id in comment.likes,
        is_disliked=viewer_id is not None and viewer_id in comment.dislikes,
        created_at=comment.created_at,
        replies=[reply_view(reply, comment, authors, viewer_id) for reply in comment.replies],
    )


def post_detail(
    db: Session,
    post: Post,
    viewer_id: int | None = None,
    order: CommentOrder = "oldest",
) -> PostDetail:
    """Project a single post with its full, ordered comment thread."""
    comments = sort_comments(load_thread(post), order)
    authors = load_authors(db, comments)
    summary = post_summary(post, viewer_id)
    return PostDetail(
        **summary.model_dump(exclude={"comments"}),
        comments=[comment_view(comment, authors, viewer_id) for comment in comments],
    )
