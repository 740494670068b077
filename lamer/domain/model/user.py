"""User aggregate root.

Users sign up with a username and password, authenticate with an opaque
auth token and accumulate karma by browsing and by receiving votes.
"""

from pydantic import Field

from lamer.domain.model.common import DomainModel
from lamer.domain.value import UserFlag, UserId


class User(DomainModel):
    """Registered user.

    The auth token is a capability: whoever holds it is logged in as this
    user until the token is rotated. Karma has no enforced floor.
    """

    id: UserId
    username: str
    salt: str
    password_hash: str
    created_at: int  # unix seconds
    karma: int = 0
    about: str = ""
    email: str = ""
    auth_token: str
    api_secret: str
    flags: str = ""
    karma_incr_time: int = 0  # anchor for throttled karma accrual
    replies: int = Field(default=0, ge=0)  # unread replies

    def has_flags(self, flags: str) -> bool:
        """Check that every capability letter in flags is set."""
        return all(flag in self.flags for flag in flags)

    @property
    def is_admin(self) -> bool:
        return self.has_flags(UserFlag.ADMIN.value)
