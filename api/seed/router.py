"""
Seed API endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter

from . import service

router = APIRouter()


@router.get("/seed")
async def run_seed() -> str:
    return await service.execute_seed()
