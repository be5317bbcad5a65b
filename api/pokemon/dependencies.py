"""
Path-parameter dependencies for Pokemon routes.
"""

from __future__ import annotations

from fastapi import HTTPException, Path, status

from core import db


async def parse_mongo_id(id: str = Path(...)) -> str:
    if not db.is_valid_object_id(id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{id} is not a valid MongoID",
        )
    return id
