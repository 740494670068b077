"""Strongly typed identifiers for Lamer News entities.

All identifiers are allocated from monotonic store counters, so they are
plain integers. NewType keeps a news id from being passed where a user id
is expected.
"""

from typing import NewType

UserId = NewType("UserId", int)
NewsId = NewType("NewsId", int)

# Scoped to a single news thread; -1 is the virtual root of the forest
CommentId = NewType("CommentId", int)

ROOT_COMMENT_ID = CommentId(-1)
