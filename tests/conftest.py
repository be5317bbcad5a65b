"""
Shared test fixtures.

Provides: an in-memory stand-in for the async Mongo database, a FastAPI test
client, and environment defaults set before any application import.
"""

import asyncio
import os

os.environ.setdefault("MONGODB", "mongodb://localhost:27017")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from types import SimpleNamespace

import bson
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import BulkWriteError, DuplicateKeyError

from core import db


def _encode(*docs: dict) -> None:
    # The real driver encodes every filter and document to BSON, which is where
    # out-of-range values such as 9-byte ints are rejected.
    for doc in docs:
        bson.encode(doc)


def _matches(doc: dict, query: dict) -> bool:
    return all(doc.get(k) == v for (k, v) in query.items())


def _project(doc: dict, projection: dict | None) -> dict:
    out = dict(doc)
    for field, flag in (projection or {}).items():
        if not flag:
            out.pop(field, None)
    return out


class FakeCursor:
    def __init__(self, docs: list[dict]):
        self._docs = docs
        self._skip = 0
        self._limit = 0

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._docs = sorted(self._docs, key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def skip(self, n: int) -> "FakeCursor":
        self._skip = n
        return self

    def limit(self, n: int) -> "FakeCursor":
        self._limit = n
        return self

    async def to_list(self, length: int | None = None) -> list[dict]:
        docs = self._docs[self._skip:]
        if self._limit:
            docs = docs[: self._limit]
        if length is not None:
            docs = docs[:length]
        return docs


class FakeCollection:
    """
    Name-keyed handle over `FakeDatabase` storage, mirroring how a real
    collection object is only a reference to server-side state.
    """

    def __init__(self, database: "FakeDatabase", name: str):
        self._database = database
        self.name = name

    @property
    def _state(self) -> dict:
        return self._database.state(self.name)

    def _check_unique(self, doc: dict, *, ignore_id=None) -> None:
        for field in self._state["unique"]:
            if field not in doc:
                continue
            for other in self._state["docs"]:
                if other["_id"] != ignore_id and other.get(field) == doc[field]:
                    raise DuplicateKeyError(
                        f"E11000 duplicate key error collection: {self.name}",
                        11000,
                        {"code": 11000, "keyValue": {field: doc[field]}},
                    )

    async def create_index(self, keys, unique: bool = False, name: str | None = None) -> str:
        if unique:
            for field, _ in keys:
                self._state["unique"].add(field)
        return name or "_".join(f for (f, _) in keys)

    async def insert_one(self, doc: dict):
        _encode(doc)
        self._check_unique(doc)
        doc.setdefault("_id", ObjectId())
        self._state["docs"].append(dict(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def insert_many(self, docs: list[dict], ordered: bool = True):
        _encode(*docs)
        # Yield like a network round trip so concurrent callers interleave.
        await asyncio.sleep(0)
        ids = []
        for index, doc in enumerate(docs):
            try:
                self._check_unique(doc)
            except DuplicateKeyError as exc:
                raise BulkWriteError(
                    {"writeErrors": [{"index": index, "code": 11000, "errmsg": str(exc)}], "nInserted": index}
                ) from exc
            doc.setdefault("_id", ObjectId())
            self._state["docs"].append(dict(doc))
            ids.append(doc["_id"])
        return SimpleNamespace(inserted_ids=ids)

    def find(self, query: dict | None = None, projection: dict | None = None) -> FakeCursor:
        _encode(query or {})
        docs = [_project(d, projection) for d in self._state["docs"] if _matches(d, query or {})]
        return FakeCursor(docs)

    async def find_one(self, query: dict, projection: dict | None = None) -> dict | None:
        _encode(query)
        for doc in self._state["docs"]:
            if _matches(doc, query):
                return _project(doc, projection)
        return None

    async def find_one_and_update(self, query, update, projection=None, return_document=None):
        _encode(query, update)
        for doc in self._state["docs"]:
            if _matches(doc, query):
                changes = update["$set"]
                self._check_unique(changes, ignore_id=doc["_id"])
                doc.update(changes)
                return _project(doc, projection)
        return None

    async def delete_one(self, query: dict):
        _encode(query)
        docs = self._state["docs"]
        for doc in docs:
            if _matches(doc, query):
                docs.remove(doc)
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def drop(self) -> None:
        self._database.collections.pop(self.name, None)

    async def rename(self, new_name: str, dropTarget: bool = False) -> None:
        state = self._database.collections.pop(self.name)
        self._database.collections[new_name] = state
        self.name = new_name


class FakeDatabase:
    def __init__(self):
        self.collections: dict[str, dict] = {}

    def state(self, name: str) -> dict:
        return self.collections.setdefault(name, {"docs": [], "unique": set()})

    def __getitem__(self, name: str) -> FakeCollection:
        return FakeCollection(self, name)

    def docs(self, name: str = "pokemons") -> list[dict]:
        return self.state(name)["docs"]

    def insert(self, name: str = "pokemons", *docs: dict) -> list[dict]:
        stored = []
        for doc in docs:
            doc = {"_id": ObjectId(), **doc}
            self.state(name)["docs"].append(doc)
            stored.append(doc)
        return stored


@pytest.fixture
def fake_db(monkeypatch):
    database = FakeDatabase()
    for field in ("no", "name"):
        database.state("pokemons")["unique"].add(field)
    monkeypatch.setattr(db, "_database", database)
    return database


@pytest.fixture
def seeded_db(fake_db):
    fake_db.insert(
        "pokemons",
        {"no": 4, "name": "charmander"},
        {"no": 1, "name": "bulbasaur"},
        {"no": 25, "name": "pikachu"},
        {"no": 7, "name": "squirtle"},
    )
    return fake_db


@pytest.fixture
def client(fake_db):
    # No `with` block: the lifespan would open a real Mongo connection.
    from main import app

    return TestClient(app)
