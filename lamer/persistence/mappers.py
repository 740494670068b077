"""Mappers between stored records and domain models.

Users and news are Redis hashes whose field names predate the domain
models (``ctime``, ``auth``, ``del`` ...). Comments are JSON documents
stored as fields of their thread hash.
"""

import json
from typing import Any, Dict, Mapping

from lamer.domain.model import Comment, News, User
from lamer.domain.value import CommentId, NewsId, UserId

# Domain field name -> stored JSON field name
COMMENT_FIELDS = {
    "parent_id": "parent_id",
    "user_id": "user_id",
    "body": "body",
    "score": "score",
    "created_at": "ctime",
    "deleted": "del",
    "up": "up",
    "down": "down",
}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value not in ("", "0", "false")
    return bool(value)


def hash_to_user(data: Mapping[str, str]) -> User:
    """Convert a ``user:<id>`` hash to a User domain model.

    Args:
        data: Hash fields as returned by HGETALL

    Returns:
        User domain model
    """
    return User(
        id=UserId(int(data["id"])),
        username=data["username"],
        salt=data["salt"],
        password_hash=data["password"],
        created_at=int(data["ctime"]),
        karma=int(data.get("karma", 0)),
        about=data.get("about", ""),
        email=data.get("email", ""),
        auth_token=data["auth"],
        api_secret=data.get("apisecret", ""),
        flags=data.get("flags", ""),
        karma_incr_time=int(data.get("karma_incr_time", 0)),
        replies=max(int(data.get("replies", 0)), 0),
    )


def user_to_hash(user: User) -> Dict[str, Any]:
    """Convert a User domain model to ``user:<id>`` hash fields."""
    return {
        "id": user.id,
        "username": user.username,
        "salt": user.salt,
        "password": user.password_hash,
        "ctime": user.created_at,
        "karma": user.karma,
        "about": user.about,
        "email": user.email,
        "auth": user.auth_token,
        "apisecret": user.api_secret,
        "flags": user.flags,
        "karma_incr_time": user.karma_incr_time,
        "replies": user.replies,
    }


def hash_to_news(data: Mapping[str, str]) -> News:
    """Convert a ``news:<id>`` hash to a News domain model.

    Args:
        data: Hash fields as returned by HGETALL

    Returns:
        News domain model
    """
    return News(
        id=NewsId(int(data["id"])),
        title=data["title"],
        url=data["url"],
        user_id=UserId(int(data["user_id"])),
        created_at=int(data["ctime"]),
        score=float(data.get("score", 0)),
        rank=float(data.get("rank", 0)),
        up=int(data.get("up", 0)),
        down=int(data.get("down", 0)),
        comments=int(data.get("comments", 0)),
        deleted=_as_bool(data.get("del", "0")),
    )


def news_to_hash(news: News) -> Dict[str, Any]:
    """Convert a News domain model to ``news:<id>`` hash fields.

    Read-time annotations (username, voted) are not persisted.
    """
    return {
        "id": news.id,
        "title": news.title,
        "url": news.url,
        "user_id": news.user_id,
        "ctime": news.created_at,
        "score": news.score,
        "rank": news.rank,
        "up": news.up,
        "down": news.down,
        "comments": news.comments,
        "del": int(news.deleted),
    }


def data_to_comment(
    news_id: NewsId, comment_id: CommentId, data: Mapping[str, Any]
) -> Comment:
    """Convert a decoded comment document to a Comment domain model."""
    return Comment(
        id=comment_id,
        news_id=news_id,
        parent_id=CommentId(int(data["parent_id"])),
        user_id=UserId(int(data["user_id"])),
        body=data.get("body") or "",
        score=int(data.get("score", 0)),
        created_at=int(data["ctime"]),
        deleted=_as_bool(data.get("del", 0)),
        up=[UserId(int(uid)) for uid in data.get("up", [])],
        down=[UserId(int(uid)) for uid in data.get("down", [])],
    )


def decode_comment(news_id: NewsId, comment_id: CommentId, raw: str) -> Comment:
    """Convert a stored comment JSON document to a Comment domain model."""
    return data_to_comment(news_id, comment_id, json.loads(raw))


def comment_to_json(comment: Comment) -> str:
    """Convert a Comment domain model to its stored JSON document.

    The id and news id are implied by the thread hash key and field.
    """
    return json.dumps(
        comment_updates_to_data(
            comment.model_dump(include=set(COMMENT_FIELDS), mode="json")
        )
    )


def comment_updates_to_data(updates: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename domain field updates to stored comment fields.

    Raises:
        KeyError: If a field is not part of the stored comment
    """
    data: Dict[str, Any] = {}
    for field, value in updates.items():
        if isinstance(value, bool):
            value = int(value)
        data[COMMENT_FIELDS[field]] = value
    return data
