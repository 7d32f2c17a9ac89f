"""Chainable query builder for Person lookups.

Nothing reaches the store until ``fetch()`` is awaited, so a query can be
built up in steps and executed once:

    people = await (
        PersonQuery(collection)
        .where({"favoriteFoods": "Knowledge"})
        .sort_by("name")
        .limit(2)
        .exclude("age")
        .fetch()
    )
"""

from __future__ import annotations

from typing import List, Optional

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING

from db_core import store_errors
from db_core.typing import MongoFilter, MongoProjection

from .errors import PersonValidationError
from .models import NAME_FIELD, Person

# Fields every Person needs to be rebuilt from a projected document.
_REQUIRED_FIELDS = frozenset({"_id", NAME_FIELD})


class PersonQuery:
    def __init__(self, collection: AsyncIOMotorCollection):
        self._collection = collection
        self._filter: MongoFilter = {}
        self._sort: list[tuple[str, int]] = []
        self._limit: Optional[int] = None
        self._excluded: list[str] = []

    def where(self, query: MongoFilter) -> "PersonQuery":
        self._filter.update(query)
        return self

    def sort_by(self, field: str, direction: int = ASCENDING) -> "PersonQuery":
        self._sort.append((field, direction))
        return self

    def limit(self, count: int) -> "PersonQuery":
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise PersonValidationError(f"limit must be a positive integer, got {count!r}")
        self._limit = count
        return self

    def exclude(self, *fields: str) -> "PersonQuery":
        for field in fields:
            if field in _REQUIRED_FIELDS:
                raise PersonValidationError(f"{field} cannot be excluded from a Person query")
            if field not in self._excluded:
                self._excluded.append(field)
        return self

    @property
    def projection(self) -> Optional[MongoProjection]:
        if not self._excluded:
            return None
        return {field: 0 for field in self._excluded}

    async def fetch(self) -> List[Person]:
        cursor = self._collection.find(self._filter, self.projection)
        if self._sort:
            cursor = cursor.sort(self._sort)
        if self._limit is not None:
            cursor = cursor.limit(self._limit)

        with store_errors("find", self._filter):
            docs = await cursor.to_list(length=None)

        logger.debug(
            "Person query {filter} sort={sort} limit={limit} exclude={exclude} -> {count} docs",
            filter=self._filter,
            sort=self._sort,
            limit=self._limit,
            exclude=self._excluded,
            count=len(docs),
        )
        return [Person.from_document(doc) for doc in docs]
