"""Domain-level errors for the people repository."""

from typing import Any, List, Optional


class PeopleRepoError(Exception):
    """Base class for Person repository errors."""


class PersonValidationError(PeopleRepoError, ValueError):
    """Raised when Person input is rejected before reaching the store."""

    def __init__(self, message: str, errors: Optional[List[dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class InvalidIdError(PeopleRepoError, ValueError):
    """Raised when a Person id is not a well-formed store identifier."""


class PersonNotFoundError(PeopleRepoError, LookupError):
    """Raised when a well-formed reference matches no Person."""


class PersonConflictError(PeopleRepoError):
    """Raised when a save loses the race against a concurrent write."""
