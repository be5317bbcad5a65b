"""
Pydantic schemas for Pokemon endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from core import db


class CreatePokemonRequest(BaseModel):
    # Unknown properties are rejected rather than silently dropped.
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    no: int = Field(..., ge=1, le=db.MAX_INT64)


class UpdatePokemonRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=100)
    no: int | None = Field(default=None, ge=1, le=db.MAX_INT64)


class PokemonResponse(BaseModel):
    id: str
    no: int
    name: str
