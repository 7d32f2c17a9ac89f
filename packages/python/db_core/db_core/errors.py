"""Store-level errors shared by Mongo-backed repositories."""

from typing import Any, Optional


class ConfigurationError(Exception):
    """Raised when the MongoDB connection settings are missing or invalid."""


class StoreError(Exception):
    """Raised when the document store reports a failure.

    ``operation`` and ``key`` describe what the repository was doing; the
    driver exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, *, operation: Optional[str] = None, key: Any = None):
        super().__init__(message)
        self.operation = operation
        self.key = key


class StoreConnectionError(StoreError, ConnectionError):
    """Raised when the store cannot be reached."""


class StoreTimeoutError(StoreError, TimeoutError):
    """Raised when the store does not answer in time."""
