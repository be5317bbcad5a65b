"""
Async MongoDB access using pymongo's native asyncio client.

This module owns the client. FastAPI initializes it on startup and closes it
on shutdown (see `api/main.py`). Feature repositories only ever ask for a
collection by name.
"""

from __future__ import annotations

from typing import Any

from bson import ObjectId
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase

from . import settings

# Largest integer BSON can store (int64).
MAX_INT64 = 2**63 - 1

_client: AsyncMongoClient | None = None
_database: AsyncDatabase | None = None


async def init_client() -> None:
    global _client, _database
    if _client is not None:
        return None
    _client = AsyncMongoClient(settings.mongodb_url(), tz_aware=True)
    _database = _client[settings.mongodb_db_name()]


async def close_client() -> None:
    global _client, _database
    if _client is None:
        return None
    await _client.close()
    _client = None
    _database = None


def database() -> AsyncDatabase:
    if _database is None:
        raise RuntimeError("Mongo client is not initialized. Call init_client() on startup.")
    return _database


def collection(name: str) -> AsyncCollection:
    return database()[name]


def is_valid_object_id(value: Any) -> bool:
    return isinstance(value, str) and ObjectId.is_valid(value)


def to_object_id(value: str) -> ObjectId:
    if not is_valid_object_id(value):
        raise ValueError(f"{value!r} is not a valid ObjectId.")
    return ObjectId(value)
