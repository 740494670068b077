"""Unit tests for record mappers."""

import json

from lamer.domain.model import Comment, News, User
from lamer.domain.value import CommentId, NewsId, UserId
from lamer.persistence.mappers import (
    comment_to_json,
    comment_updates_to_data,
    decode_comment,
    hash_to_news,
    hash_to_user,
    news_to_hash,
    user_to_hash,
)


def stringify(mapping):
    """What HGETALL returns with decoded responses."""
    return {key: str(value) for key, value in mapping.items()}


class TestUserMapping:
    """Tests for user hash mapping."""

    def test_user_uses_stored_field_names(self):
        user = User(
            id=UserId(3),
            username="alice",
            salt="s",
            password_hash="h",
            created_at=100,
            karma=12,
            auth_token="tok",
            api_secret="sec",
        )

        data = user_to_hash(user)

        assert data["password"] == "h"
        assert data["ctime"] == 100
        assert data["auth"] == "tok"
        assert data["apisecret"] == "sec"
        assert hash_to_user(stringify(data)) == user

    def test_negative_replies_read_as_zero(self):
        data = {
            "id": "1",
            "username": "alice",
            "salt": "s",
            "password": "h",
            "ctime": "1",
            "auth": "t",
            "replies": "-3",
        }

        assert hash_to_user(data).replies == 0


class TestNewsMapping:
    """Tests for news hash mapping."""

    def test_news_hash_fields(self):
        news = News(
            id=NewsId(7),
            title="Title",
            url="https://example.com/",
            user_id=UserId(1),
            created_at=100,
            score=2.0,
            rank=1.5,
            deleted=True,
            username="not persisted",
        )

        data = news_to_hash(news)

        assert data["del"] == 1
        assert "username" not in data
        restored = hash_to_news(stringify(data))
        assert restored.deleted
        assert restored.rank == 1.5
        assert restored.username is None

    def test_missing_del_field_means_live(self):
        data = {
            "id": "1",
            "title": "t",
            "url": "text://x",
            "user_id": "1",
            "ctime": "5",
        }

        assert hash_to_news(data).deleted is False


class TestCommentMapping:
    """Tests for comment JSON documents."""

    def test_comment_document_layout(self):
        comment = Comment(
            id=CommentId(4),
            news_id=NewsId(2),
            parent_id=CommentId(1),
            user_id=UserId(9),
            body="hi",
            created_at=100,
            up=[UserId(5)],
        )

        document = json.loads(comment_to_json(comment))

        assert document == {
            "parent_id": 1,
            "user_id": 9,
            "body": "hi",
            "score": 0,
            "ctime": 100,
            "del": 0,
            "up": [5],
            "down": [],
        }
        assert decode_comment(NewsId(2), CommentId(4), comment_to_json(comment)) == comment

    def test_updates_are_renamed(self):
        assert comment_updates_to_data({"deleted": True, "body": "x"}) == {
            "del": 1,
            "body": "x",
        }
