"""
Comment API endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, status

from core.schemas import MessageResponse

from . import schemas, service

router = APIRouter()


@router.get("/coments/", response_model=list[schemas.CommentThread])
async def list_post_comments(post_id: UUID = Query(..., alias="postId")) -> list[dict]:
    """
    Top-level comments of a post (newest first), each with its direct replies.
    """
    return await service.list_post_comments(post_id)


@router.post("/commentcreate", response_model=schemas.CommentThread, status_code=status.HTTP_201_CREATED)
async def create_comment(payload: schemas.CommentCreateRequest) -> dict:
    return await service.create_comment(payload)


@router.put("/comment", response_model=schemas.CommentThread)
async def update_comment(payload: schemas.CommentUpdateRequest) -> dict:
    return await service.update_comment(payload)


@router.delete("/comment/", response_model=MessageResponse)
async def delete_comment(payload: schemas.CommentDeleteRequest) -> dict:
    return await service.delete_comment(payload)
