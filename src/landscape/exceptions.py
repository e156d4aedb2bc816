"""Custom exceptions for landscape generation."""


class LandscapeError(Exception):
    """Base exception for landscape errors."""

    pass


class ConfigurationError(LandscapeError):
    """Raised when a generation config cannot produce a valid terrain."""

    pass


class BuildStateError(LandscapeError):
    """Raised when a builder operation is invoked out of order."""

    pass
