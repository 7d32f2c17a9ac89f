"""Configuration helpers for MongoDB connections used by db_core.

Applications can create a new ``MongoSettings`` instance at startup and hand
it to ``MongoConnection``, or install it with ``override_settings`` before the
first connection is opened. Values default to the process environment,
after loading the nearest ``.env`` file.
"""
import os
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv
from loguru import logger
from pydantic import BaseModel, Field

from .errors import ConfigurationError

# Search for the nearest .env so running from subdirectories still loads root config.
load_dotenv(find_dotenv(usecwd=True))

_URI_SCHEMES = ("mongodb://", "mongodb+srv://")


def _env_db_name() -> Optional[str]:
    # DB_NAME is the variable name older .env files use.
    return os.getenv("MONGO_DB_NAME") or os.getenv("DB_NAME")


class MongoSettings(BaseModel):
    """Basic MongoDB configuration that domain apps can extend if needed."""

    uri: Optional[str] = Field(default_factory=lambda: os.getenv("MONGO_URI"))
    db_name: Optional[str] = Field(default_factory=_env_db_name)
    # Kept as given; parsed by require() so a bad value never breaks import.
    timeout_ms: Union[int, str] = Field(
        default_factory=lambda: os.getenv("MONGO_TIMEOUT_MS", "5000")
    )
    app_name: str = Field(default_factory=lambda: os.getenv("MONGO_APP_NAME", "people-repo"))

    def require(self) -> "MongoSettings":
        """Fail fast unless a usable URI and database name are configured."""

        if not self.uri or not self.uri.strip():
            raise ConfigurationError("MONGO_URI is not set")
        if not self.uri.strip().startswith(_URI_SCHEMES):
            raise ConfigurationError(
                f"MONGO_URI must start with one of {', '.join(_URI_SCHEMES)}"
            )
        if not self.db_name or not self.db_name.strip():
            raise ConfigurationError("MONGO_DB_NAME (or DB_NAME) is not set")
        try:
            timeout = int(self.timeout_ms)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"MONGO_TIMEOUT_MS must be an integer, got {self.timeout_ms!r}"
            ) from None
        if timeout <= 0:
            raise ConfigurationError("MONGO_TIMEOUT_MS must be a positive number of milliseconds")
        return self

    @property
    def server_selection_timeout_ms(self) -> int:
        return int(self.timeout_ms)


def _default_settings() -> "MongoSettings":
    """Provide a factory to keep settings override logic simple in the future."""

    return MongoSettings()


settings: MongoSettings = _default_settings()
logger.debug(
    "MongoSettings initialized with db_name={db_name} uri_configured={configured}",
    db_name=settings.db_name,
    configured=bool(settings.uri),
)


def get_settings() -> MongoSettings:
    """Return the process-wide settings currently in effect."""

    return settings


def override_settings(new_settings: MongoSettings) -> MongoSettings:
    """Replace the process-wide settings; call before opening a connection."""

    global settings
    settings = new_settings
    return settings
