# src/pulsar/api/v1/endpoints/users.py
"""Profile and follow-graph endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from pulsar.api.v1.dependencies import CurrentUserDep, OptionalUserDep, SessionDep
from pulsar.schemas.post import UserPostsResponse
from pulsar.schemas.user import (
    FollowersResponse,
    FollowingResponse,
    FollowResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
)
from pulsar.services import engagement, user_service
from pulsar.services.feed import get_author_posts
from pulsar.services.projection import public_user, user_profile, user_summary

router = APIRouter(prefix="/users", tags=["users"])


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_my_profile(
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ProfileUpdateResponse:
    """Update the caller's display name, bio, location or avatar."""
    user = user_service.update_profile(db, current_user, payload)
    return ProfileUpdateResponse(message="Profile updated", user=public_user(user))


@router.get("/{username}", response_model=ProfileResponse)
async def get_profile(username: str, db: SessionDep, viewer: OptionalUserDep) -> ProfileResponse:
    """Return a user's profile; `isFollowing` reflects the viewer, if any."""
    user = user_service.get_user_by_username_or_404(db, username)
    return ProfileResponse(user=user_profile(user, viewer))


@router.post("/{user_id}/follow", response_model=FollowResponse)
async def follow_user(user_id: int, current_user: CurrentUserDep, db: SessionDep) -> FollowResponse:
    """Follow or unfollow a user.

    Raises:
        ValidationError: If the caller targets themselves
        NotFoundError: If the target user does not exist
    """
    target = user_service.get_user_or_404(db, user_id)
    is_following = engagement.toggle_follow(db, current_user, target)
    return FollowResponse(
        message="Followed" if is_following else "Unfollowed",
        is_following=is_following,
    )


@router.get("/{user_id}/followers", response_model=FollowersResponse)
async def list_followers(user_id: int, db: SessionDep) -> FollowersResponse:
    """List the users following `user_id`."""
    user = user_service.get_user_or_404(db, user_id)
    return FollowersResponse(followers=[user_summary(u) for u in user.followers])


@router.get("/{user_id}/following", response_model=FollowingResponse)
async def list_following(user_id: int, db: SessionDep) -> FollowingResponse:
    """List the users `user_id` follows."""
    user = user_service.get_user_or_404(db, user_id)
    return FollowingResponse(following=[user_summary(u) for u in user.following])


@router.get("/{username}/posts", response_model=UserPostsResponse)
async def list_user_posts(
    username: str,
    db: SessionDep,
    viewer: OptionalUserDep,
) -> UserPostsResponse:
    """List a user's posts, newest first."""
    user = user_service.get_user_by_username_or_404(db, username)
    return UserPostsResponse(posts=get_author_posts(db, user, viewer))
