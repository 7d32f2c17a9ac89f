"""Async persistence layer for Person documents.

Every operation issues its store calls through ``db_core.store_errors`` so a
driver failure reaches the caller as a ``StoreError`` subclass, while "nothing
matched" is reported as an empty list or ``None`` for lookups and as
``PersonNotFoundError`` for operations that need an existing record.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Union

from bson import ObjectId
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pydantic import ValidationError
from pymongo import ASCENDING, ReturnDocument

from db_core import store_errors

from .errors import InvalidIdError, PersonConflictError, PersonNotFoundError, PersonValidationError
from .models import (
    AGE_FIELD,
    FOODS_FIELD,
    NAME_FIELD,
    VERSION_FIELD,
    Person,
    PersonCreate,
    RemovalSummary,
)
from .query import PersonQuery
from .schema import COLLECTION_NAME

PersonId = Union[str, ObjectId]
PersonInput = Union[PersonCreate, Mapping[str, Any]]


def _object_id(person_id: PersonId) -> ObjectId:
    if isinstance(person_id, ObjectId):
        return person_id
    if isinstance(person_id, str) and ObjectId.is_valid(person_id):
        return ObjectId(person_id)
    raise InvalidIdError(f"{person_id!r} is not a valid Person id")


def _validation_error(exc: ValidationError, label: str) -> PersonValidationError:
    fields = ", ".join(".".join(str(part) for part in err["loc"]) or label for err in exc.errors())
    return PersonValidationError(
        f"Invalid {label}: {fields}",
        errors=exc.errors(include_url=False),
    )


def _validate_create(record: PersonInput, label: str = "person") -> PersonCreate:
    if isinstance(record, PersonCreate):
        record = record.model_dump()
    try:
        return PersonCreate.model_validate(record)
    except ValidationError as exc:
        raise _validation_error(exc, label) from exc


def _require_text(value: Any, field: str) -> str:
    # Filter values must be plain strings; a dict would be read as a query operator.
    if not isinstance(value, str) or not value.strip():
        raise PersonValidationError(f"{field} must be a non-empty string")
    return value


class PersonRepository:
    """Typed data access for the ``people`` collection."""

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = COLLECTION_NAME):
        self._collection: AsyncIOMotorCollection = db[collection_name]

    def query(self) -> PersonQuery:
        return PersonQuery(self._collection)

    # ---------------------------------------------------------
    # CREATE
    # ---------------------------------------------------------
    async def create(
        self,
        name: str,
        age: Optional[int] = None,
        favorite_foods: Optional[Iterable[str]] = None,
    ) -> Person:
        payload = _validate_create(
            {
                "name": name,
                "age": age,
                "favorite_foods": favorite_foods,
            }
        )
        doc = payload.to_document()
        doc[VERSION_FIELD] = 0

        with store_errors("insert_one", payload.name):
            result = await self._collection.insert_one(doc)

        logger.info("Created person {name} ({id})", name=payload.name, id=result.inserted_id)
        return Person(id=str(result.inserted_id), **payload.model_dump())

    async def create_many(self, records: Iterable[PersonInput]) -> List[Person]:
        """Insert a batch after validating every record.

        One invalid record rejects the whole batch before anything is sent.
        The insert itself is a single ordered ``insert_many`` without a
        transaction, so a store failure part way through can leave the
        records before it persisted.
        """

        payloads = [
            _validate_create(record, label=f"person at index {index}")
            for index, record in enumerate(records)
        ]
        if not payloads:
            return []

        docs = []
        for payload in payloads:
            doc = payload.to_document()
            doc[VERSION_FIELD] = 0
            docs.append(doc)

        with store_errors("insert_many", [payload.name for payload in payloads]):
            result = await self._collection.insert_many(docs, ordered=True)

        logger.info("Created {count} people", count=len(result.inserted_ids))
        return [
            Person(id=str(inserted_id), **payload.model_dump())
            for inserted_id, payload in zip(result.inserted_ids, payloads)
        ]

    # ---------------------------------------------------------
    # READ
    # ---------------------------------------------------------
    async def find_by_name(self, name: str) -> List[Person]:
        _require_text(name, "name")
        return await self.query().where({NAME_FIELD: name}).fetch()

    async def find_one_by_favorite_food(self, food: str) -> Optional[Person]:
        _require_text(food, "food")
        with store_errors("find_one", food):
            doc = await self._collection.find_one({FOODS_FIELD: food})
        logger.debug("find_one_by_favorite_food {food} -> {found}", food=food, found=bool(doc))
        return Person.from_document(doc) if doc else None

    async def find_by_id(self, person_id: PersonId) -> Optional[Person]:
        oid = _object_id(person_id)
        with store_errors("find_one", str(oid)):
            doc = await self._collection.find_one({"_id": oid})
        logger.debug("find_by_id {id} -> {found}", id=oid, found=bool(doc))
        return Person.from_document(doc) if doc else None

    async def count(self) -> int:
        with store_errors("count_documents"):
            return await self._collection.count_documents({})

    async def query_favorite_food(
        self,
        food: str,
        *,
        limit: Optional[int] = None,
        sort_by_name_ascending: bool = False,
        exclude_age_field: bool = False,
    ) -> List[Person]:
        _require_text(food, "food")
        query = self.query().where({FOODS_FIELD: food})
        if sort_by_name_ascending:
            query.sort_by(NAME_FIELD, ASCENDING)
        if limit is not None:
            query.limit(limit)
        if exclude_age_field:
            query.exclude(AGE_FIELD)
        return await query.fetch()

    # ---------------------------------------------------------
    # UPDATE
    # ---------------------------------------------------------
    async def save(self, person: Person) -> Person:
        """Replace the stored record with ``person`` (edit-then-save).

        The write only lands if the stored version still matches the one
        that was read; otherwise ``PersonConflictError`` is raised and the
        caller decides whether to re-read and retry.
        """

        try:
            checked = Person.model_validate(person.model_dump())
        except ValidationError as exc:
            raise _validation_error(exc, "person") from exc

        oid = _object_id(checked.id)
        doc = PersonCreate.model_validate(checked.model_dump()).to_document()
        doc[VERSION_FIELD] = checked.version + 1

        # Documents written before versioning have no __v; treat them as version 0.
        expected = {"$in": [0, None]} if checked.version == 0 else checked.version
        with store_errors("replace_one", str(oid)):
            result = await self._collection.replace_one({"_id": oid, VERSION_FIELD: expected}, doc)

        if result.matched_count == 0:
            raise PersonConflictError(
                f"Person {oid} changed or was removed since version {checked.version} was read"
            )

        logger.debug("Saved person {id} at version {version}", id=oid, version=doc[VERSION_FIELD])
        return checked.model_copy(update={"version": doc[VERSION_FIELD]})

    async def add_favorite_food_and_save(self, person_id: PersonId, food: str) -> Person:
        _require_text(food, "food")
        person = await self.find_by_id(person_id)
        if person is None:
            raise PersonNotFoundError(f"Person {person_id} not found")

        edited = person.model_copy(update={"favorite_foods": [*person.favorite_foods, food]})
        return await self.save(edited)

    async def set_age_by_name(self, name: str, age: Optional[int]) -> Person:
        _require_text(name, "name")
        if age is not None and (isinstance(age, bool) or not isinstance(age, int)):
            raise PersonValidationError(f"age must be an integer, got {age!r}")

        with store_errors("find_one_and_update", name):
            doc = await self._collection.find_one_and_update(
                {NAME_FIELD: name},
                {"$set": {AGE_FIELD: age}, "$inc": {VERSION_FIELD: 1}},
                return_document=ReturnDocument.AFTER,
            )

        if not doc:
            raise PersonNotFoundError(f"No person named {name!r}")
        logger.debug("Set age of {name} to {age}", name=name, age=age)
        return Person.from_document(doc)

    # ---------------------------------------------------------
    # DELETE
    # ---------------------------------------------------------
    async def remove_by_id(self, person_id: PersonId) -> Person:
        oid = _object_id(person_id)
        with store_errors("find_one_and_delete", str(oid)):
            doc = await self._collection.find_one_and_delete({"_id": oid})

        if not doc:
            raise PersonNotFoundError(f"Person {oid} not found")
        logger.info("Removed person {id}", id=oid)
        return Person.from_document(doc)

    async def remove_all_by_name(self, name: str) -> RemovalSummary:
        """Delete every Person called ``name``.

        The match count comes from a separate ``count_documents`` call, so a
        concurrent insert or delete can make it differ from ``deleted_count``.
        """

        _require_text(name, "name")
        query = {NAME_FIELD: name}
        with store_errors("count_documents", name):
            matched = await self._collection.count_documents(query)
        with store_errors("delete_many", name):
            result = await self._collection.delete_many(query)

        logger.info(
            "Removed {deleted} of {matched} people named {name}",
            deleted=result.deleted_count,
            matched=matched,
            name=name,
        )
        return RemovalSummary(matched_count=matched, deleted_count=result.deleted_count)
