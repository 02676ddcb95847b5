"""
Post API endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, status

from core.schemas import MessageResponse

from . import schemas, service

router = APIRouter()


@router.get("/posts", response_model=list[schemas.PostDetail])
async def list_posts() -> list[dict]:
    return await service.list_posts()


@router.get("/post/{post_id}", response_model=schemas.PostDetail)
async def get_post(post_id: UUID) -> dict:
    return await service.get_post(post_id)


@router.get("/posts/{biome_id}", response_model=list[schemas.PostDetail])
async def list_posts_by_biome(biome_id: UUID) -> list[dict]:
    return await service.list_posts_by_biome(biome_id)


@router.post("/postcreate/", response_model=schemas.PostDetail, status_code=status.HTTP_201_CREATED)
async def create_post(payload: schemas.PostCreateRequest) -> dict:
    return await service.create_post(payload)


@router.put("/postupdate", response_model=schemas.PostDetail)
async def update_post(payload: schemas.PostUpdateRequest) -> dict:
    return await service.update_post(payload)


@router.delete("/postdelete", response_model=MessageResponse)
async def delete_post(payload: schemas.PostDeleteRequest) -> dict:
    return await service.delete_post(payload)
