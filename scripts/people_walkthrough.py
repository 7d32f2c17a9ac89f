#!/usr/bin/env python3
"""
Run the Person CRUD tutorial end to end against the configured MongoDB.

Reads MONGO_URI and MONGO_DB_NAME (or DB_NAME) from the environment / .env.

Usage:
    python scripts/people_walkthrough.py [--keep] [--apply-validator]
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

from loguru import logger

from db_core import ConfigurationError, MongoConnection, StoreError
from people_repo import PersonRepository, apply_person_validator
from people_repo.walkthrough import run_walkthrough


def _configure_logging() -> None:
    level = os.getenv("LOG_LEVEL") or os.getenv("LOGURU_LEVEL") or "INFO"
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
    logger.info("Logger configured at {level} level", level=level.upper())


async def _run(keep: bool, apply_validator: bool) -> None:
    async with MongoConnection() as db:
        if apply_validator:
            await apply_person_validator(db)
        await run_walkthrough(PersonRepository(db), keep=keep)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Replay the Person CRUD tutorial")
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Leave the created records in the collection",
    )
    parser.add_argument(
        "--apply-validator",
        action="store_true",
        help="Create the people collection validator before running",
    )
    args = parser.parse_args(argv)

    _configure_logging()
    try:
        asyncio.run(_run(args.keep, args.apply_validator))
    except ConfigurationError as exc:
        logger.error("Configuration error: {error}", error=exc)
        return 2
    except StoreError as exc:
        logger.error("Store error during {operation}: {error}", operation=exc.operation, error=exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
