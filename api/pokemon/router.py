"""
Pokemon API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from core import settings

from . import dependencies, schemas, service

router = APIRouter()


@router.post("/pokemon", status_code=status.HTTP_201_CREATED)
async def create_pokemon(request: schemas.CreatePokemonRequest) -> schemas.PokemonResponse:
    return await service.create(request)


@router.get("/pokemon")
async def list_pokemon(
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
) -> list[schemas.PokemonResponse]:
    return await service.find_all(
        limit=limit if limit is not None else settings.default_limit(),
        offset=offset,
    )


@router.get("/pokemon/{term}")
async def get_pokemon(term: str) -> schemas.PokemonResponse:
    return await service.find_one(term)


@router.patch("/pokemon/{term}")
async def update_pokemon(
    term: str,
    request: schemas.UpdatePokemonRequest,
) -> schemas.PokemonResponse:
    return await service.update(term, request)


@router.delete("/pokemon/{id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pokemon(pokemon_id: str = Depends(dependencies.parse_mongo_id)) -> None:
    await service.remove(pokemon_id)
