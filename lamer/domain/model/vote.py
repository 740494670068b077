"""Vote entity.

A vote is an edge from a user to a news item. Each user can vote once per
item, either up or down, and the vote cannot be changed afterwards.
"""

from lamer.domain.model.common import DomainModel
from lamer.domain.value import NewsId, UserId, VoteType


class Vote(DomainModel):
    """Vote on a news item."""

    news_id: NewsId
    user_id: UserId
    type: VoteType
    created_at: int  # unix seconds, used as the sorted-set score
