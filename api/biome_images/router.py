"""
Biome image API endpoints (multipart uploads, field `file`).
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, File, Form, Response, UploadFile, status

from core import uploads

from . import schemas, service

router = APIRouter()


@router.post("/createImage", response_model=schemas.BiomeImageResponse, status_code=status.HTTP_201_CREATED)
async def create_image(
    file: UploadFile | None = File(default=None),
    biome_id: UUID | None = Form(default=None, alias="biomeId"),
    description: str | None = Form(default=None),
) -> dict:
    async with uploads.stored_upload(file) as filename:
        return await service.create_image(
            filename=filename,
            biome_id=biome_id,
            description=description,
        )


@router.post("/imageslist", response_model=list[schemas.BiomeImageResponse])
async def list_images() -> list[dict]:
    return await service.list_images()


@router.get("/image/{image_id}", response_model=schemas.BiomeImageResponse)
async def get_image(image_id: UUID) -> dict:
    return await service.get_image(image_id)


@router.post("/imageupdate", response_model=schemas.BiomeImageResponse)
async def update_image(
    image_id: UUID = Form(..., alias="id"),
    file: UploadFile | None = File(default=None),
    biome_id: UUID | None = Form(default=None, alias="biomeId"),
    description: str | None = Form(default=None),
) -> dict:
    """
    Update description/biome; a new `file` replaces the stored image.
    """
    async with uploads.optional_stored_upload(file) as filename:
        return await service.update_image(
            image_id,
            description=description,
            biome_id=biome_id,
            filename=filename,
        )


@router.post("/imagedelete", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_image(payload: schemas.BiomeImageDeleteRequest) -> Response:
    await service.delete_image(payload.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
