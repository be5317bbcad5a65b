"""
Pokemon business logic.

Scope:
- create/list/find/update/delete over the `pokemons` collection
- translation of store failures into HTTP errors
"""

from __future__ import annotations

import json
import logging
from typing import NoReturn

from fastapi import HTTPException, status
from pymongo.errors import DuplicateKeyError, PyMongoError

from core import db

from . import repository, schemas

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


def _parse_no(term: str) -> int | None:
    try:
        no = int(term)
    except ValueError:
        return None
    # A 24-digit ObjectId parses as an int but can never be a stored `no`.
    if not -db.MAX_INT64 - 1 <= no <= db.MAX_INT64:
        return None
    return no


def _handle_store_error(exc: PyMongoError, *, action: str) -> NoReturn:
    if isinstance(exc, DuplicateKeyError):
        key_value = (exc.details or {}).get("keyValue") or {}
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Pokemon already exists in db {json.dumps(key_value, default=str)}",
        ) from exc

    logger.exception("Failed to %s pokemon", action)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Can't {action} pokemon - check server logs",
    ) from exc


async def create(payload: schemas.CreatePokemonRequest) -> dict:
    try:
        return await repository.insert_pokemon(name=payload.name, no=payload.no)
    except PyMongoError as exc:
        _handle_store_error(exc, action="create")


async def find_all(*, limit: int = DEFAULT_LIMIT, offset: int = 0) -> list[dict]:
    try:
        return await repository.list_pokemon(limit=limit, offset=offset)
    except PyMongoError as exc:
        _handle_store_error(exc, action="list")


async def find_one(term: str) -> dict:
    """
    Resolve `term` as an ordinal number, then a document id, then a name.

    The first lookup that yields a record wins.
    """
    term = (term or "").strip()
    pokemon: dict | None = None

    try:
        no = _parse_no(term)
        if no is not None:
            pokemon = await repository.get_by_no(no)

        if pokemon is None and db.is_valid_object_id(term):
            pokemon = await repository.get_by_id(term)

        if pokemon is None:
            pokemon = await repository.get_by_name(term)
    except PyMongoError as exc:
        _handle_store_error(exc, action="find")

    if pokemon is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f'Pokemon with id, name or no "{term}" not found',
        )
    return pokemon


async def update(term: str, payload: schemas.UpdatePokemonRequest) -> dict:
    pokemon = await find_one(term)

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in changes:
        changes["name"] = repository.normalize_name(changes["name"])
    if not changes:
        return pokemon

    try:
        updated = await repository.update_pokemon(pokemon["id"], changes)
    except PyMongoError as exc:
        _handle_store_error(exc, action="update")

    if updated is None:
        # Deleted between the lookup and the write.
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f'Pokemon with id, name or no "{term}" not found',
        )
    return updated


async def remove(pokemon_id: str) -> None:
    if not db.is_valid_object_id(pokemon_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{pokemon_id} is not a valid MongoID",
        )

    try:
        deleted_count = await repository.delete_pokemon(pokemon_id)
    except PyMongoError as exc:
        _handle_store_error(exc, action="delete")

    if deleted_count == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Pokemon with id "{pokemon_id}" not found',
        )
