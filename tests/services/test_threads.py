# mypy: ignore-errors
"""Tests for the embedded comment thread rules."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from pulsar.core.errors import NotFoundError
from pulsar.models import Post
from pulsar.services import threads
from pulsar.services.threads import Comment, Reply


def _post() -> Post:
    return Post(author_id=1, content="hello", image="", comments=[])


def _comment_with_score(score: int, content: str) -> Comment:
    comment = Comment(author_id=1, content=content)
    if score >= 0:
        comment.likes = list(range(100, 100 + score))
    else:
        comment.dislikes = list(range(200, 200 - score))
    return comment


class TestCommentInsertion:
    """Comments and replies are appended in arrival order."""

    def test_add_comment_is_stored_on_post(self):
        post = _post()
        comment = threads.add_comment(post, 7, "nice")

        assert len(post.comments) == 1
        stored = post.comments[0]
        assert stored["id"] == comment.id
        assert stored["author_id"] == 7
        assert stored["parent_id"] is None
        assert stored["replies"] == []

    def test_reply_is_appended_to_comment(self):
        post = _post()
        comment = threads.add_comment(post, 7, "nice")

        parent, reply = threads.add_reply(post, comment.id, 8, "thanks")

        assert parent.id == comment.id
        loaded = threads.load_thread(post)
        assert [r.id for r in loaded[0].replies] == [reply.id]
        assert loaded[0].replies[0].author_id == 8

    def test_reply_to_reply_lands_on_top_level_comment(self):
        post = _post()
        comment = threads.add_comment(post, 7, "nice")
        _, first = threads.add_reply(post, comment.id, 8, "thanks")

        parent, second = threads.add_reply(post, first.id, 9, "you're welcome")

        assert parent.id == comment.id
        loaded = threads.load_thread(post)
        assert len(loaded) == 1
        assert [r.id for r in loaded[0].replies] == [first.id, second.id]
        assert all("replies" not in doc for doc in post.comments[0]["replies"])

    def test_reply_to_unknown_comment_raises(self):
        post = _post()
        threads.add_comment(post, 7, "nice")

        with pytest.raises(NotFoundError):
            threads.add_reply(post, "missing", 8, "thanks")

    def test_reply_model_cannot_hold_replies(self):
        with pytest.raises(PydanticValidationError):
            Reply.model_validate({"author_id": 1, "content": "x", "replies": []})


class TestSentimentToggle:
    """Likes and dislikes on a comment never overlap."""

    def test_like_twice_removes_like(self):
        comment = Comment(author_id=1, content="x")

        assert threads.toggle_sentiment(comment, 5, "like") is True
        assert threads.toggle_sentiment(comment, 5, "like") is False
        assert comment.likes == []

    def test_like_evicts_dislike(self):
        comment = Comment(author_id=1, content="x", dislikes=[5])

        threads.toggle_sentiment(comment, 5, "like")

        assert comment.likes == [5]
        assert 5 not in comment.dislikes

    def test_dislike_evicts_like(self):
        comment = Comment(author_id=1, content="x", likes=[5, 6])

        threads.toggle_sentiment(comment, 5, "dislike")

        assert comment.dislikes == [5]
        assert comment.likes == [6]

    @pytest.mark.parametrize("start_likes,start_dislikes", [([], []), ([3], []), ([], [3])])
    def test_like_always_clears_dislike(self, start_likes, start_dislikes):
        comment = Comment(author_id=1, content="x", likes=start_likes, dislikes=start_dislikes)

        threads.toggle_sentiment(comment, 3, "like")

        assert 3 not in comment.dislikes

    def test_react_on_reply_updates_only_the_reply(self):
        post = _post()
        comment = threads.add_comment(post, 7, "nice")
        _, reply = threads.add_reply(post, comment.id, 8, "thanks")

        entry = threads.react(post, reply.id, 9, "dislike")

        assert entry.id == reply.id
        loaded = threads.load_thread(post)
        assert loaded[0].dislikes == []
        assert loaded[0].replies[0].dislikes == [9]

    def test_react_on_unknown_entry_raises(self):
        with pytest.raises(NotFoundError):
            threads.react(_post(), "missing", 9, "like")


class TestCommentOrdering:
    """Display orderings computed at read time."""

    def test_best_keeps_insertion_order_for_ties(self):
        first = _comment_with_score(5, "first")
        middle = _comment_with_score(-1, "middle")
        last = _comment_with_score(5, "last")

        ordered = threads.sort_comments([first, middle, last], "best")

        assert [c.content for c in ordered] == ["first", "last", "middle"]

    def test_newest_and_oldest(self):
        base = datetime(2024, 1, 1, tzinfo=UTC)
        comments = [
            Comment(author_id=1, content=str(i), created_at=base + timedelta(minutes=i))
            for i in range(3)
        ]

        assert [c.content for c in threads.sort_comments(comments, "oldest")] == ["0", "1", "2"]
        assert [c.content for c in threads.sort_comments(comments, "newest")] == ["2", "1", "0"]

    def test_sorting_does_not_change_storage_order(self):
        post = _post()
        for content in ("a", "b", "c"):
            threads.add_comment(post, 1, content)
        comments = threads.load_thread(post)
        comments[2].likes = [1, 2]

        threads.sort_comments(comments, "best")

        assert [doc["content"] for doc in post.comments] == ["a", "b", "c"]
