"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    reason = "error"


class ValidationError(DomainError):
    """Domain validation error."""

    reason = "invalid"


class AuthenticationError(DomainError):
    """Raised when credentials or an auth token do not identify a user."""

    reason = "bad_credentials"


class NotFoundError(DomainError):
    """Raised when the target of a mutation does not exist."""

    reason = "not_found"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ForbiddenError(DomainError):
    """Base for ownership, time-window and karma violations."""

    reason = "forbidden"


class NotAuthorizedError(ForbiddenError):
    """Raised when a user attempts to edit content they don't own."""

    reason = "not_owner"

    def __init__(self, resource: str, resource_id: str, user_id: str):
        super().__init__(
            f"User {user_id} is not authorized to edit {resource} {resource_id}"
        )


class EditWindowExpiredError(ForbiddenError):
    """Raised when an edit arrives after the allowed edit window."""

    reason = "edit_window_expired"

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"Edit window for {resource} {resource_id} has expired")


class InsufficientKarmaError(ForbiddenError):
    """Raised when a user lacks the karma required for an action."""

    reason = "insufficient_karma"


class ContentDeletedError(DomainError):
    """Raised when attempting to mutate deleted content."""

    reason = "deleted"

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"Cannot modify deleted {resource} {resource_id}")


class ConflictError(DomainError):
    """Base for uniqueness violations."""

    reason = "conflict"


class UsernameTakenError(ConflictError):
    """Raised when a username (case-insensitive) is already registered."""

    reason = "username_taken"

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username is busy: {username}")


class DuplicateVoteError(ConflictError):
    """Raised when a user votes twice on the same item."""

    reason = "duplicate_vote"


class UrlAlreadySubmittedError(ConflictError):
    """Raised when an edit would reuse a URL locked by another submission."""

    reason = "url_taken"

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"URL was already submitted recently: {url}")


class RateLimitedError(DomainError):
    """Raised when a throttle or cool-down marker is active."""

    reason = "rate_limited"

    def __init__(self, action: str, retry_after: int | None = None):
        self.action = action
        self.retry_after = retry_after
        message = f"Rate limited: {action}"
        if retry_after is not None and retry_after > 0:
            message += f" (retry in {retry_after}s)"
        super().__init__(message)
