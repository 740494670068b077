"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    pass


class ConfigurationError(UtilError):
    """Raised when settings cannot be turned into a working component."""

    pass


class DependencyInjectionError(UtilError):
    """Raised when providers cannot be assembled into a container."""

    pass
