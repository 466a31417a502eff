# src/pulsar/api/v1/endpoints/posts.py
"""Post, like and comment endpoints for the Pulsar API."""

from typing import Annotated

from fastapi import APIRouter, Query, status
from sqlalchemy.orm import Session

from pulsar.api.v1.dependencies import CurrentUserDep, OptionalUserDep, SessionDep
from pulsar.core.settings import settings
from pulsar.schemas.comment import (
    CommentCreate,
    CommentCreatedResponse,
    ReplyCreatedResponse,
    SentimentResponse,
)
from pulsar.schemas.common import MessageResponse
from pulsar.schemas.post import (
    FeedResponse,
    LikeResponse,
    PostCreate,
    PostDetailResponse,
    PostMutationResponse,
    PostUpdate,
    RepostResponse,
)
from pulsar.services import engagement, post_service, threads
from pulsar.services.feed import get_feed_page
from pulsar.services.projection import (
    comment_view,
    load_authors,
    post_detail,
    post_summary,
    reply_view,
)

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=FeedResponse)
async def list_posts(
    db: SessionDep,
    viewer: OptionalUserDep,
    page: Annotated[int, Query(ge=1, description="1-based page number")] = 1,
    limit: Annotated[
        int,
        Query(ge=1, le=settings.feed_max_page_size, description="Posts per page"),
    ] = settings.feed_page_size,
) -> FeedResponse:
    """Return a page of the feed, newest first.

    Args:
        db: Database session
        viewer: Authenticated caller, if a valid token was sent
        page: Page number, starting at 1
        limit: Number of posts per page

    Returns:
        Posts with engagement counts plus pagination metadata
    """
    return get_feed_page(db, page=page, limit=limit, viewer=viewer)


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post(
    post_id: int,
    db: SessionDep,
    viewer: OptionalUserDep,
    sort: Annotated[threads.CommentOrder, Query(description="Comment ordering")] = "oldest",
) -> PostDetailResponse:
    """Get a single post with its full comment thread.

    Raises:
        NotFoundError: If the post does not exist
    """
    post = post_service.get_post_or_404(db, post_id)
    viewer_id = viewer.id if viewer is not None else None
    return PostDetailResponse(post=post_detail(db, post, viewer_id, sort))


@router.post("", response_model=PostMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostMutationResponse:
    """Publish a new post as the caller."""
    post = post_service.create_post(db, current_user, post_data)
    return PostMutationResponse(message="Post created", post=post_summary(post, current_user.id))


@router.put("/{post_id}", response_model=PostMutationResponse)
async def update_post(
    post_id: int,
    post_data: PostUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostMutationResponse:
    """Edit a post's content or image.

    Raises:
        NotFoundError: If the post does not exist
        PermissionDeniedError: If the caller is not the author
    """
    post = post_service.get_post_or_404(db, post_id)
    post = post_service.update_post(db, post, current_user, post_data)
    return PostMutationResponse(message="Post updated", post=post_summary(post, current_user.id))


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Delete a post along with its comments.

    Raises:
        NotFoundError: If the post does not exist
        PermissionDeniedError: If the caller is not the author
    """
    post = post_service.get_post_or_404(db, post_id)
    post_service.delete_post(db, post, current_user)
    return MessageResponse(message="Post deleted")


@router.post("/{post_id}/like", response_model=LikeResponse)
async def like_post(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> LikeResponse:
    """Toggle the caller's like on a post."""
    post = post_service.get_post_or_404(db, post_id)
    likes, is_liked = engagement.toggle_post_like(db, post, current_user)
    return LikeResponse(
        message="Post liked" if is_liked else "Like removed",
        likes=likes,
        is_liked=is_liked,
    )


@router.post("/{post_id}/repost", response_model=RepostResponse)
async def repost_post(
    post_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> RepostResponse:
    """Toggle the caller's repost of a post."""
    post = post_service.get_post_or_404(db, post_id)
    reposts, is_reposted = engagement.toggle_repost(db, post, current_user)
    return RepostResponse(
        message="Post reposted" if is_reposted else "Repost removed",
        reposts=reposts,
        is_reposted=is_reposted,
    )


@router.post(
    "/{post_id}/comment",
    response_model=CommentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: int,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommentCreatedResponse:
    """Add a top-level comment to a post."""
    post = post_service.get_post_or_404(db, post_id)
    comment = threads.add_comment(post, current_user.id, payload.content)
    db.commit()
    authors = load_authors(db, [comment])
    return CommentCreatedResponse(
        message="Comment added",
        comment=comment_view(comment, authors, current_user.id),
    )


@router.post(
    "/{post_id}/comment/{comment_id}/reply",
    response_model=ReplyCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def reply_to_comment(
    post_id: int,
    comment_id: str,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ReplyCreatedResponse:
    """Reply to a comment.

    Replying to a reply attaches the new reply to the top-level comment that
    owns it; threads never nest deeper than one level of replies.

    Raises:
        NotFoundError: If the post or the comment does not exist
    """
    post = post_service.get_post_or_404(db, post_id)
    parent, reply = threads.add_reply(post, comment_id, current_user.id, payload.content)
    db.commit()
    authors = load_authors(db, [parent])
    return ReplyCreatedResponse(
        message="Reply added",
        reply=reply_view(reply, parent, authors, current_user.id),
    )


def _react(
    db: Session,
    post_id: int,
    comment_id: str,
    user_id: int,
    sentiment: threads.Sentiment,
) -> SentimentResponse:
    post = post_service.get_post_or_404(db, post_id)
    entry = threads.react(post, comment_id, user_id, sentiment)
    db.commit()

    is_liked = user_id in entry.likes
    is_disliked = user_id in entry.dislikes
    if sentiment == "like":
        message = "Comment liked" if is_liked else "Like removed"
    else:
        message = "Comment disliked" if is_disliked else "Dislike removed"
    return SentimentResponse(
        message=message,
        likes=len(entry.likes),
        dislikes=len(entry.dislikes),
        is_liked=is_liked,
        is_disliked=is_disliked,
    )


@router.post("/{post_id}/comment/{comment_id}/like", response_model=SentimentResponse)
async def like_comment(
    post_id: int,
    comment_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> SentimentResponse:
    """Toggle a like on a comment or reply, clearing any dislike first."""
    return _react(db, post_id, comment_id, current_user.id, "like")


@router.post("/{post_id}/comment/{comment_id}/dislike", response_model=SentimentResponse)
async def dislike_comment(
    post_id: int,
    comment_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> SentimentResponse:
    """Toggle a dislike on a comment or reply, clearing any like first."""
    return _react(db, post_id, comment_id, current_user.id, "dislike")
