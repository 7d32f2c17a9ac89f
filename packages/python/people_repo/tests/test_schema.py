import pytest
from pymongo.errors import CollectionInvalid, OperationFailure

from db_core import StoreError
from people_repo import COLLECTION_NAME, PERSON_JSON_SCHEMA, apply_person_validator


class RecordingDatabase:
    def __init__(self, create_error=None, command_error=None):
        self.create_error = create_error
        self.command_error = command_error
        self.created = []
        self.commands = []

    async def create_collection(self, name):
        self.created.append(name)
        if self.create_error is not None:
            raise self.create_error

    async def command(self, name, target, **kwargs):
        self.commands.append((name, target, kwargs))
        if self.command_error is not None:
            raise self.command_error
        return {"ok": 1.0}


def test_schema_requires_name():
    assert PERSON_JSON_SCHEMA["required"] == ["name"]
    assert PERSON_JSON_SCHEMA["properties"]["favoriteFoods"]["items"] == {"bsonType": "string"}


async def test_apply_validator_creates_collection_and_sets_validator():
    db = RecordingDatabase()

    await apply_person_validator(db)

    assert db.created == [COLLECTION_NAME]
    assert db.commands == [
        ("collMod", COLLECTION_NAME, {"validator": {"$jsonSchema": PERSON_JSON_SCHEMA}})
    ]


async def test_apply_validator_tolerates_existing_collection():
    db = RecordingDatabase(create_error=CollectionInvalid("collection people already exists"))

    await apply_person_validator(db)

    assert len(db.commands) == 1


async def test_apply_validator_surfaces_store_failure():
    db = RecordingDatabase(command_error=OperationFailure("not authorized"))

    with pytest.raises(StoreError) as info:
        await apply_person_validator(db)

    assert info.value.operation == "collMod"
