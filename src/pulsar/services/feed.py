"""Paged, viewer-aware feed of posts."""
from __future__ import annotations

import math

from sqlalchemy.orm import Session

from pulsar.models import User
from pulsar.repositories.post_repo import PostRepository
from pulsar.schemas.common import Pagination
from pulsar.schemas.post import FeedResponse, PostSummary
from pulsar.services.projection import post_summary


def get_feed_page(db: Session, *, page: int, limit: int, viewer: User | None) -> FeedResponse:
    """Return page `page` (1-based) of the global feed, newest first."""
    repo = PostRepository(db)
    total = repo.count()
    posts = repo.list_recent(offset=(page - 1) * limit, limit=limit)
    viewer_id = viewer.id if viewer is not None else None

    pages = math.ceil(total / limit)
    return FeedResponse(
        posts=[post_summary(post, viewer_id) for post in posts],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=pages,
            has_more=page < pages,
        ),
    )


def get_author_posts(db: Session, author: User, viewer: User | None = None) -> list[PostSummary]:
    """Return every post by `author`, newest first."""
    viewer_id = viewer.id if viewer is not None else None
    return [
        post_summary(post, viewer_id)
        for post in PostRepository(db).list_by_author(author.id)
    ]
