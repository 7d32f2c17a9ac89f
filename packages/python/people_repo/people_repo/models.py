"""Pydantic models describing Person documents."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator

from db_core.errors import StoreError
from db_core.typing import MongoDocument

# Stored field names stay in the shape the collection already uses.
NAME_FIELD = "name"
AGE_FIELD = "age"
FOODS_FIELD = "favoriteFoods"
VERSION_FIELD = "__v"


class PersonCreate(BaseModel):
    """Payload for inserting a new Person."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    name: str
    age: Optional[StrictInt] = None
    favorite_foods: List[str] = Field(default_factory=list, alias=FOODS_FIELD)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be empty")
        return value

    @field_validator("favorite_foods", mode="before")
    @classmethod
    def _foods_default(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_document(self) -> dict[str, Any]:
        return {
            NAME_FIELD: self.name,
            AGE_FIELD: self.age,
            FOODS_FIELD: list(self.favorite_foods),
        }


class Person(PersonCreate):
    """Representation of a Person stored in MongoDB."""

    id: str
    version: int = Field(default=0, alias=VERSION_FIELD)

    @classmethod
    def from_document(cls, doc: MongoDocument) -> "Person":
        """Build a Person from a stored document.

        Documents written by other clients may hold whole-number doubles for
        ``age``; those load as ints. Anything else that does not fit the model
        raises ``StoreError`` rather than a pydantic error.
        """

        age = doc.get(AGE_FIELD)
        if isinstance(age, float) and age.is_integer():
            age = int(age)
        try:
            return cls(
                id=str(doc["_id"]),
                name=doc.get(NAME_FIELD),
                age=age,
                favorite_foods=doc.get(FOODS_FIELD),
                version=doc.get(VERSION_FIELD) or 0,
            )
        except ValidationError as exc:
            raise StoreError(
                f"Stored person {doc.get('_id')} does not match the Person model: {exc}",
                operation="decode",
                key=str(doc.get("_id")),
            ) from exc


class RemovalSummary(BaseModel):
    """Outcome of a bulk delete; the deleted documents are not returned."""

    matched_count: int = 0
    deleted_count: int = 0
