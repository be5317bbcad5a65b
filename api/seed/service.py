"""
Seed routine: replace the Pokemon collection with the PokeAPI listing.

The listing is fetched and parsed before anything is written; the swap
itself happens in `pokemon.repository.replace_all`.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status
from pymongo.errors import PyMongoError

from core import db, http, settings
from pokemon import repository as pokemon_repository

logger = logging.getLogger(__name__)

SEED_DONE_MESSAGE = "Seed executed"


def no_from_url(url: str) -> int | None:
    """
    `https://pokeapi.co/api/v2/pokemon/25/` -> 25
    """
    segment = (url or "").rstrip("/").rsplit("/", 1)[-1]
    if not segment.isdigit():
        return None
    no = int(segment)
    return no if no <= db.MAX_INT64 else None


def _parse_listing(data: Any) -> list[dict]:
    results = data.get("results") if isinstance(data, dict) else None
    if not isinstance(results, list):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Seed source returned no results list.",
        )

    rows: list[dict] = []
    for item in results:
        if not isinstance(item, dict):
            continue
        name = str(item.get("name") or "").strip()
        no = no_from_url(str(item.get("url") or ""))
        if not name or no is None:
            logger.warning("Skipping malformed seed entry: %r", item)
            continue
        rows.append({"name": name, "no": no})
    return rows


async def execute_seed() -> str:
    source_url = settings.seed_source_url()
    try:
        data = await http.get_json(source_url)
    except http.HttpAdapterError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    rows = _parse_listing(data)
    logger.info("Fetched %d pokemon from %s", len(rows), source_url)

    try:
        inserted = await pokemon_repository.replace_all(rows)
    except PyMongoError as exc:
        logger.exception("Seed insert failed; live collection left unchanged")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Can't seed pokemon - check server logs",
        ) from exc

    logger.info("Seeded %d pokemon", inserted)
    return SEED_DONE_MESSAGE
