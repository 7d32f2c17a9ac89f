"""Minimal MongoDB helpers shared across domain repositories.

Example usage in a domain repository:

    from db_core import MongoConnection

    async def main():
        async with MongoConnection() as db:
            cursor = db["people"].find({"name": "Spock"}).sort("name", 1)
            return await cursor.to_list(length=100)
"""

from .errors import ConfigurationError, StoreConnectionError, StoreError, StoreTimeoutError
from .mongo import MongoConnection, create_mongo_client, ping, store_errors
from .settings import MongoSettings, get_settings, override_settings

__all__ = [
    "ConfigurationError",
    "MongoConnection",
    "MongoSettings",
    "StoreConnectionError",
    "StoreError",
    "StoreTimeoutError",
    "create_mongo_client",
    "get_settings",
    "override_settings",
    "ping",
    "store_errors",
]
