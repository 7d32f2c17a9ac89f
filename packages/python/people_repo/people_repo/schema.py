"""Server-side ``$jsonSchema`` validator for the people collection."""

from __future__ import annotations

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import CollectionInvalid

from db_core import store_errors

from .models import AGE_FIELD, FOODS_FIELD, NAME_FIELD, VERSION_FIELD

COLLECTION_NAME = "people"

PERSON_JSON_SCHEMA = {
    "bsonType": "object",
    "required": [NAME_FIELD],
    "properties": {
        NAME_FIELD: {"bsonType": "string", "minLength": 1},
        AGE_FIELD: {"bsonType": ["int", "long", "null"]},
        FOODS_FIELD: {"bsonType": "array", "items": {"bsonType": "string"}},
        VERSION_FIELD: {"bsonType": ["int", "long"]},
    },
}


async def apply_person_validator(db: AsyncIOMotorDatabase) -> None:
    """Create the collection if needed and attach the Person validator."""

    with store_errors("create_collection", COLLECTION_NAME):
        try:
            await db.create_collection(COLLECTION_NAME)
        except CollectionInvalid:
            # Already exists; collMod below updates the validator in place.
            pass

    with store_errors("collMod", COLLECTION_NAME):
        await db.command(
            "collMod",
            COLLECTION_NAME,
            validator={"$jsonSchema": PERSON_JSON_SCHEMA},
        )
    logger.info("Applied Person validator to collection {name}", name=COLLECTION_NAME)
