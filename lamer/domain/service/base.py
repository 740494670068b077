"""Base service class for domain services."""

import time


class Service:
    """Base class for all domain services.

    Domain services hold the engine rules that span several records:
    scores, ranks, karma and comment trees.
    """

    @staticmethod
    def now() -> int:
        """Current unix time in seconds, the resolution every record uses."""
        return int(time.time())
