from uuid import uuid4

import pytest
from mongomock_motor import AsyncMongoMockClient

from people_repo import PersonRepository


@pytest.fixture()
def db():
    return AsyncMongoMockClient()[f"people_{uuid4().hex}"]


@pytest.fixture()
def repo(db):
    return PersonRepository(db)


@pytest.fixture()
async def crew(repo):
    return await repo.create_many(
        [
            {"name": "Picard", "age": 56, "favoriteFoods": ["Earl Grey"]},
            {"name": "Spock", "age": 34, "favoriteFoods": ["Knowledge"]},
            {"name": "Worf", "age": 32, "favoriteFoods": ["Gagh"]},
        ]
    )
