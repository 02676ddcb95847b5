"""
Biome API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Query, Response, status

from core.schemas import BiomeRecord

from . import schemas, service

router = APIRouter()


@router.post("/biome", response_model=BiomeRecord, status_code=status.HTTP_201_CREATED)
async def create_biome(payload: schemas.BiomeCreateRequest) -> dict:
    return await service.create_biome(payload)


@router.get("/biomes", response_model=list[schemas.BiomeSummary])
async def list_biomes() -> list[dict]:
    return await service.list_biomes()


@router.get("/biomes/", response_model=schemas.BiomeSummary)
async def search_biome(
    name: str | None = Query(default=None, max_length=200),
    payload: schemas.BiomeSearchRequest | None = Body(default=None),
) -> dict:
    """
    Case-insensitive substring search; `name` comes from the query string or
    the JSON body.
    """
    if name is None and payload is not None:
        name = payload.name
    return await service.search_biome_by_name(name)


@router.get("/biome/{name}", response_model=schemas.BiomeDetail)
async def get_biome(name: str) -> dict:
    return await service.get_biome_by_name(name)


@router.put("/biome/", response_model=BiomeRecord)
async def update_biome(payload: schemas.BiomeUpdateRequest) -> dict:
    return await service.update_biome(payload)


@router.delete("/biomes/", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_biome(payload: schemas.BiomeDeleteRequest) -> Response:
    await service.delete_biome(payload.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
