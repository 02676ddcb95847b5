"""
Biome image business logic.

Files are stored by `core.uploads` before these functions run; the router
removes a freshly stored file again when a function here raises.
"""

from __future__ import annotations

from uuid import UUID

from biomes import repository as biomes_repository
from core import db, uploads
from core.errors import NotFoundError, ValidationError
from core.logging_config import get_logger

from . import repository

logger = get_logger("biome_images")


def _key(value: object) -> str:
    return str(value)


async def _with_biomes(images: list[dict]) -> list[dict]:
    if not images:
        return []
    biomes = await biomes_repository.list_biomes_by_ids(db.unique_ids(i["biome_id"] for i in images))
    biomes_by_id = {_key(b["id"]): b for b in biomes}
    return [{**image, "biome": biomes_by_id.get(_key(image["biome_id"]))} for image in images]


async def _require_biome(biome_id: UUID) -> None:
    if await biomes_repository.get_biome_by_id(biome_id) is None:
        raise NotFoundError("Biome", biome_id)


async def create_image(*, filename: str, biome_id: UUID | None, description: str | None = None) -> dict:
    if biome_id is None:
        raise ValidationError("biomeId is required.", field="biomeId")
    await _require_biome(biome_id)

    image = await repository.create_image(
        filename=filename,
        description=(description or "").strip() or None,
        biome_id=biome_id,
    )
    logger.info("Image %s stored for biome %s", image["id"], biome_id)
    expanded = await _with_biomes([image])
    return expanded[0]


async def list_images() -> list[dict]:
    return await _with_biomes(await repository.list_images())


async def get_image(image_id: UUID) -> dict:
    image = await repository.get_image_by_id(image_id)
    if image is None:
        raise NotFoundError("Image", image_id)
    expanded = await _with_biomes([image])
    return expanded[0]


async def update_image(
    image_id: UUID,
    *,
    description: str | None = None,
    biome_id: UUID | None = None,
    filename: str | None = None,
) -> dict:
    """
    Update the fields that were sent; a new filename replaces the stored file.
    """
    existing = await repository.get_image_by_id(image_id)
    if existing is None:
        raise NotFoundError("Image", image_id)

    fields: dict = {}
    if description is not None:
        fields["description"] = description.strip() or None
    if biome_id is not None:
        await _require_biome(biome_id)
        fields["biome_id"] = biome_id
    if filename is not None:
        fields["filename"] = filename

    image = await repository.update_image(image_id, fields)
    if image is None:
        raise NotFoundError("Image", image_id)

    if filename is not None and existing["filename"] != filename:
        await uploads.remove_upload(existing["filename"])

    expanded = await _with_biomes([image])
    return expanded[0]


async def delete_image(image_id: UUID) -> None:
    image = await repository.delete_image(image_id)
    if image is None:
        raise NotFoundError("Image", image_id)
    await uploads.remove_upload(image["filename"])
    logger.info("Image %s deleted", image_id)
