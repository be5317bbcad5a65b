"""
Pokemon persistence (MongoDB).

Documents are stored as `{_id, no, name}` and handed back to callers as
plain dicts with a string `id`.
"""

from __future__ import annotations

from typing import Any

from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from core import db

COLLECTION = "pokemons"

# Fields written by other ODMs that must never leak out.
_HIDDEN_FIELDS = {"__v": 0}


def normalize_name(name: str) -> str:
    return (name or "").strip().lower()


def _collection(name: str = COLLECTION) -> AsyncCollection:
    return db.collection(name)


def _doc_to_dict(doc: dict[str, Any] | None) -> dict[str, Any] | None:
    if doc is None:
        return None
    out = {k: v for (k, v) in doc.items() if k not in ("_id", "__v")}
    out["id"] = str(doc["_id"])
    return out


async def ensure_indexes(collection_name: str = COLLECTION) -> None:
    coll = _collection(collection_name)
    await coll.create_index([("no", ASCENDING)], unique=True, name="no_unique")
    await coll.create_index([("name", ASCENDING)], unique=True, name="name_unique")


async def insert_pokemon(*, name: str, no: int) -> dict:
    doc = {"name": normalize_name(name), "no": int(no)}
    result = await _collection().insert_one(doc)
    doc["_id"] = result.inserted_id
    return _doc_to_dict(doc)


async def list_pokemon(*, limit: int, offset: int) -> list[dict]:
    cursor = (
        _collection()
        .find({}, _HIDDEN_FIELDS)
        .sort("no", ASCENDING)
        .skip(offset)
        .limit(limit)
    )
    return [_doc_to_dict(doc) for doc in await cursor.to_list()]


async def get_by_no(no: int) -> dict | None:
    return _doc_to_dict(await _collection().find_one({"no": no}))


async def get_by_id(pokemon_id: str) -> dict | None:
    if not db.is_valid_object_id(pokemon_id):
        return None
    return _doc_to_dict(await _collection().find_one({"_id": db.to_object_id(pokemon_id)}))


async def get_by_name(name: str) -> dict | None:
    return _doc_to_dict(await _collection().find_one({"name": normalize_name(name)}))


async def update_pokemon(pokemon_id: str, changes: dict[str, Any]) -> dict | None:
    """
    Apply a partial `$set` and return the document as persisted afterwards.
    """
    doc = await _collection().find_one_and_update(
        {"_id": db.to_object_id(pokemon_id)},
        {"$set": changes},
        projection=_HIDDEN_FIELDS,
        return_document=ReturnDocument.AFTER,
    )
    return _doc_to_dict(doc)


async def delete_pokemon(pokemon_id: str) -> int:
    result = await _collection().delete_one({"_id": db.to_object_id(pokemon_id)})
    return result.deleted_count


async def replace_all(rows: list[dict[str, Any]]) -> int:
    """
    Swap the whole collection for `rows`.

    Rows land in a staging collection (same unique indexes) which is then
    renamed over the live one, so readers see either the old set or the new
    set. On failure the staging collection is dropped and the live collection
    is left as it was.
    """
    # Unique per call so overlapping seeds never share a staging collection.
    staging_name = f"{COLLECTION}_staging_{ObjectId()}"
    staging = _collection(staging_name)
    try:
        await ensure_indexes(staging_name)
        if rows:
            await staging.insert_many(
                [{"name": normalize_name(r["name"]), "no": int(r["no"])} for r in rows],
                ordered=True,
            )
        await staging.rename(COLLECTION, dropTarget=True)
    except Exception:
        await staging.drop()
        raise
    return len(rows)
