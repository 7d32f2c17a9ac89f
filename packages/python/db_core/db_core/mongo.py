"""Async MongoDB helpers built on top of Motor.

Only generic utilities live here; domain repositories import these helpers and
build their own repositories, schemas, and validation on top."""

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import (
    ConnectionFailure,
    ExecutionTimeout,
    NetworkTimeout,
    PyMongoError,
    WTimeoutError,
)

from .errors import (
    ConfigurationError,
    StoreConnectionError,
    StoreError,
    StoreTimeoutError,
)
from .settings import MongoSettings, get_settings

_TIMEOUT_ERRORS = (NetworkTimeout, ExecutionTimeout, WTimeoutError)


@contextmanager
def store_errors(operation: str, key: Any = None) -> Iterator[None]:
    """Translate driver exceptions raised inside the block into ``StoreError``."""

    try:
        yield
    except _TIMEOUT_ERRORS as exc:
        _log_failure(operation, key, exc)
        raise StoreTimeoutError(
            f"{operation} timed out: {exc}", operation=operation, key=key
        ) from exc
    except ConnectionFailure as exc:
        _log_failure(operation, key, exc)
        raise StoreConnectionError(
            f"{operation} could not reach the store: {exc}", operation=operation, key=key
        ) from exc
    except PyMongoError as exc:
        _log_failure(operation, key, exc)
        raise StoreError(f"{operation} failed: {exc}", operation=operation, key=key) from exc


def _log_failure(operation: str, key: Any, exc: Exception) -> None:
    logger.warning(
        "Mongo {operation} failed for key={key}: {error}",
        operation=operation,
        key=key,
        error=exc,
    )


def create_mongo_client(config: MongoSettings) -> AsyncIOMotorClient:
    """Return a Motor client configured from ``config``."""

    config.require()
    return AsyncIOMotorClient(
        config.uri,
        serverSelectionTimeoutMS=config.server_selection_timeout_ms,
        appname=config.app_name,
    )


async def ping(db: AsyncIOMotorDatabase) -> dict[str, Any]:
    """Run a simple ``ping`` command against the configured MongoDB server."""

    with store_errors("ping"):
        await db.command("ping")
    return {"ok": True}


class MongoConnection:
    """Process-wide connection handle with an explicit open/close lifecycle.

    Open it once at startup, pass ``database`` to repositories, close it at
    shutdown. A client may be injected (tests, shared pools); an injected
    client is not closed by ``close()``.
    """

    def __init__(
        self,
        config: Optional[MongoSettings] = None,
        client: Optional[AsyncIOMotorClient] = None,
    ):
        self._config = config
        self._client = client
        self._owns_client = client is None
        self._db: Optional[AsyncIOMotorDatabase] = None

    @property
    def config(self) -> MongoSettings:
        return self._config if self._config is not None else get_settings()

    @property
    def database(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            raise ConfigurationError("MongoConnection.open() has not been called")
        return self._db

    async def open(self) -> AsyncIOMotorDatabase:
        if self._db is not None:
            return self._db

        config = self.config.require()
        if self._client is None:
            self._client = create_mongo_client(config)
            self._owns_client = True

        db = self._client[config.db_name]
        try:
            await ping(db)
        except StoreError:
            self._release_client()
            raise

        self._db = db
        logger.info("Connected to MongoDB database {db_name}", db_name=config.db_name)
        return db

    async def close(self) -> None:
        if self._db is None and (self._client is None or not self._owns_client):
            return
        self._db = None
        self._release_client()
        logger.info("MongoDB connection closed")

    def _release_client(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    async def __aenter__(self) -> AsyncIOMotorDatabase:
        return await self.open()

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
