# mypy: ignore-errors
"""Tests for like, repost and follow toggles."""

import pytest

from pulsar.core.errors import ValidationError
from pulsar.services import engagement
from tests.factories import make_user


def test_toggle_membership_on_plain_list() -> None:
    members = [1, 2]

    assert engagement.toggle_membership(members, 3) is True
    assert members == [1, 2, 3]
    assert engagement.toggle_membership(members, 2) is False
    assert members == [1, 3]


def test_post_like_is_its_own_inverse(db_session, test_post, other_user) -> None:
    count, liked = engagement.toggle_post_like(db_session, test_post, other_user)
    assert (count, liked) == (1, True)

    count, liked = engagement.toggle_post_like(db_session, test_post, other_user)
    assert (count, liked) == (0, False)

    db_session.refresh(test_post)
    assert other_user not in test_post.likes


def test_repost_toggle(db_session, test_post, other_user) -> None:
    assert engagement.toggle_repost(db_session, test_post, other_user) == (1, True)
    assert engagement.toggle_repost(db_session, test_post, other_user) == (0, False)


def test_follow_updates_both_sides(db_session, test_user, other_user) -> None:
    assert engagement.toggle_follow(db_session, test_user, other_user) is True

    db_session.expire_all()
    assert [u.id for u in test_user.following] == [other_user.id]
    assert [u.id for u in other_user.followers] == [test_user.id]


def test_second_follow_removes_both_sides(db_session, test_user, other_user) -> None:
    engagement.toggle_follow(db_session, test_user, other_user)
    assert engagement.toggle_follow(db_session, test_user, other_user) is False

    db_session.expire_all()
    assert test_user.following == []
    assert other_user.followers == []


def test_follow_is_directional(db_session, test_user, other_user) -> None:
    engagement.toggle_follow(db_session, test_user, other_user)

    db_session.expire_all()
    assert other_user.following == []
    assert test_user.followers == []


def test_self_follow_is_rejected_without_writes(db_session, test_user) -> None:
    with pytest.raises(ValidationError):
        engagement.toggle_follow(db_session, test_user, test_user)

    db_session.expire_all()
    assert test_user.following == []
    assert test_user.followers == []


def test_follow_graph_with_several_users(db_session, test_user) -> None:
    others = [make_user(db_session, name) for name in ("carol", "dave", "erin")]
    for other in others:
        engagement.toggle_follow(db_session, other, test_user)

    db_session.expire_all()
    assert sorted(u.id for u in test_user.followers) == sorted(u.id for u in others)
    for other in others:
        assert [u.id for u in other.following] == [test_user.id]
