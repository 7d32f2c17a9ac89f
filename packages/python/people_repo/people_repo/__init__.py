"""Person repository over the ``people`` MongoDB collection."""

from .errors import (
    InvalidIdError,
    PeopleRepoError,
    PersonConflictError,
    PersonNotFoundError,
    PersonValidationError,
)
from .models import Person, PersonCreate, RemovalSummary
from .query import PersonQuery
from .repository import PersonRepository
from .schema import COLLECTION_NAME, PERSON_JSON_SCHEMA, apply_person_validator

__all__ = [
    "COLLECTION_NAME",
    "InvalidIdError",
    "PERSON_JSON_SCHEMA",
    "PeopleRepoError",
    "Person",
    "PersonConflictError",
    "PersonCreate",
    "PersonNotFoundError",
    "PersonQuery",
    "PersonRepository",
    "PersonValidationError",
    "RemovalSummary",
    "apply_person_validator",
]
