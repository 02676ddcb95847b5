"""
User API endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, File, UploadFile, status

from core import uploads
from core.schemas import MessageResponse

from . import schemas, service

router = APIRouter()


@router.post("/usercreate", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(payload: schemas.UserCreateRequest) -> dict:
    return await service.create_user(payload)


@router.get("/users", response_model=list[schemas.UserDetailResponse])
async def list_users() -> list[dict]:
    return await service.list_users()


@router.get("/user/{user_id}", response_model=schemas.UserDetailResponse)
async def get_user(user_id: UUID) -> dict:
    return await service.get_user(user_id)


@router.put("/userupdate/", response_model=schemas.UserResponse)
async def update_user(payload: schemas.UserUpdateRequest) -> dict:
    return await service.update_user(payload)


@router.put("/userimage/{user_id}", response_model=schemas.UserResponse)
async def set_profile_image(
    user_id: UUID,
    file: UploadFile | None = File(default=None),
) -> dict:
    """
    Store the uploaded image (multipart field `file`) as the user's profile image.
    """
    async with uploads.stored_upload(file) as filename:
        return await service.set_profile_image(user_id, filename)


@router.delete("/user/", response_model=MessageResponse)
async def delete_user(payload: schemas.UserDeleteRequest) -> dict:
    return await service.delete_user(payload.id)
