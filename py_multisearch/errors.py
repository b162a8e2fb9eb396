class MultiSearchError(Exception):
    """Base error for the project."""


class ConfigurationError(MultiSearchError, ValueError):
    """Raised when the searchable properties given to a collection are unusable."""


class UnhashableValueError(MultiSearchError, TypeError):
    """Raised when an extraction function produces a value that cannot be indexed."""
