"""MongoDB client for the document-database metadata backend."""
from __future__ import annotations

import logging

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

logger = logging.getLogger(__name__)

# Simple reusable singleton client getter for repositories
_CLIENT_SINGLETON: AsyncMongoClient | None = None


def get_mongo_client(uri: str) -> AsyncMongoClient:
    global _CLIENT_SINGLETON
    if _CLIENT_SINGLETON is None:
        # tz_aware so upload timestamps come back as UTC datetimes
        _CLIENT_SINGLETON = AsyncMongoClient(uri, tz_aware=True)
        logger.info("MongoDB client created for %s", uri.rsplit("@", 1)[-1])
    return _CLIENT_SINGLETON


def get_mongo_database(uri: str, database_name: str) -> AsyncDatabase:
    return get_mongo_client(uri)[database_name]


async def close_mongo_client() -> None:
    global _CLIENT_SINGLETON
    if _CLIENT_SINGLETON is not None:
        await _CLIENT_SINGLETON.close()
        _CLIENT_SINGLETON = None
