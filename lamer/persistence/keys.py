"""Redis key layout.

The layout is shared with existing Lamer News databases and must not
change:

    users.count                     user id counter
    user:<id>                       user hash
    username.to.id:<lower name>     username -> user id
    auth:<token>                    auth token -> user id
    news.count                      news id counter
    news:<id>                       news hash
    news.up:<id> / news.down:<id>   zset user id -> vote time
    news.top / news.cron            zset news id -> rank / ctime
    user.posted:<id>                zset news id -> ctime
    user.saved:<id>                 zset news id -> vote time
    user.comments:<id>              zset "<news>-<comment>" -> ctime
    user.replies:<id>               zset "<news>-<comment>" -> ctime
    url:<url>                       news id, expires after the repost window
    user:<id>:submitted_recently    submission cool-down marker
    thread:comment:<news id>        hash "nextid" + comment id -> JSON
    limit:<tag>.<tag>...            rate limit marker
"""

from typing import Sequence

from lamer.domain.value import CommentId, NewsId, UserId, VoteType

USERS_COUNT = "users.count"
NEWS_COUNT = "news.count"
NEWS_TOP = "news.top"
NEWS_CRON = "news.cron"

THREAD_NEXT_ID = "nextid"


def user(user_id: UserId) -> str:
    return f"user:{user_id}"


def username_to_id(username: str) -> str:
    return f"username.to.id:{username.lower()}"


def auth(token: str) -> str:
    return f"auth:{token}"


def news(news_id: NewsId) -> str:
    return f"news:{news_id}"


def news_votes(news_id: NewsId, vote_type: VoteType) -> str:
    return f"news.{vote_type.value}:{news_id}"


def user_posted(user_id: UserId) -> str:
    return f"user.posted:{user_id}"


def user_saved(user_id: UserId) -> str:
    return f"user.saved:{user_id}"


def user_comments(user_id: UserId) -> str:
    return f"user.comments:{user_id}"


def user_replies(user_id: UserId) -> str:
    return f"user.replies:{user_id}"


def url(news_url: str) -> str:
    return f"url:{news_url}"


def submitted_recently(user_id: UserId) -> str:
    return f"user:{user_id}:submitted_recently"


def thread(news_id: NewsId) -> str:
    return f"thread:comment:{news_id}"


def rate_limit(tags: Sequence[str]) -> str:
    return "limit:" + ".".join(str(tag) for tag in tags)


def comment_ref(news_id: NewsId, comment_id: CommentId) -> str:
    return f"{news_id}-{comment_id}"


def parse_comment_ref(ref: str) -> tuple[NewsId, CommentId]:
    news_id, _, comment_id = ref.partition("-")
    return NewsId(int(news_id)), CommentId(int(comment_id))
