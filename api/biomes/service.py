"""
Biome business logic.
"""

from __future__ import annotations

from collections import defaultdict
from uuid import UUID

from biome_images import repository as images_repository
from core import db, uploads
from core.errors import ConflictError, NotFoundError, ValidationError
from core.logging_config import get_logger
from core.validators import clean_text, is_blank, require_fields
from posts import repository as posts_repository
from posts import service as posts_service

from . import repository, schemas

logger = get_logger("biomes")


def _key(value: object) -> str:
    return str(value)


async def _with_images_and_posts(biomes: list[dict]) -> list[dict]:
    """
    Attach images and flat post rows to each biome.
    """
    if not biomes:
        return []

    biome_ids = db.unique_ids(b["id"] for b in biomes)
    images = await images_repository.list_images_by_biomes(biome_ids)
    posts = await posts_repository.list_posts_by_biomes(biome_ids)

    images_by_biome: dict[str, list[dict]] = defaultdict(list)
    for image in images:
        images_by_biome[_key(image["biome_id"])].append(image)
    posts_by_biome: dict[str, list[dict]] = defaultdict(list)
    for post in posts:
        posts_by_biome[_key(post["biome_id"])].append(post)

    return [
        {
            **biome,
            "images": images_by_biome.get(_key(biome["id"]), []),
            "posts": posts_by_biome.get(_key(biome["id"]), []),
        }
        for biome in biomes
    ]


async def create_biome(payload: schemas.BiomeCreateRequest) -> dict:
    values = payload.model_dump()
    require_fields({field: values.get(field) for field in repository.TEXT_FIELDS}, message="All fields are required.")
    cleaned = {field: clean_text(values[field], field) for field in repository.TEXT_FIELDS}

    if await repository.get_biome_by_name(cleaned["name"]) is not None:
        raise ConflictError(repository.NAME_TAKEN_MESSAGE, field="name")

    biome = await repository.create_biome(**cleaned)
    logger.info("Biome %s (%s) created", biome["id"], biome["name"])
    return biome


async def list_biomes() -> list[dict]:
    return await _with_images_and_posts(await repository.list_biomes())


async def get_biome_by_name(name: str) -> dict:
    """
    Exact-name lookup with images and fully expanded posts.
    """
    if is_blank(name):
        raise ValidationError("Biome name is required.", field="name")

    biome = await repository.get_biome_by_name(name)
    if biome is None:
        raise NotFoundError("Biome", name)

    images = await images_repository.list_images_by_biomes([biome["id"]])
    posts = await posts_service.expand_posts(await posts_repository.list_posts_by_biomes([biome["id"]]))
    return {**biome, "images": images, "posts": posts}


async def search_biome_by_name(name: str | None) -> dict:
    """
    First biome whose name contains `name` (case-insensitive).
    """
    if is_blank(name):
        raise ValidationError("Biome name is required.", field="name")

    biome = await repository.search_biome_by_name(str(name).strip())
    if biome is None:
        raise NotFoundError("Biome", name)
    expanded = await _with_images_and_posts([biome])
    return expanded[0]


async def update_biome(payload: schemas.BiomeUpdateRequest) -> dict:
    existing = await repository.get_biome_by_id(payload.id)
    if existing is None:
        raise NotFoundError("Biome", payload.id)

    supplied = payload.model_fields_set
    fields = {
        field: clean_text(getattr(payload, field), field)
        for field in repository.TEXT_FIELDS
        if field in supplied
    }

    new_name = fields.get("name")
    if new_name is not None and new_name != existing["name"]:
        other = await repository.get_biome_by_name(new_name)
        if other is not None and _key(other["id"]) != _key(payload.id):
            raise ConflictError(repository.NAME_TAKEN_MESSAGE, field="name")

    biome = await repository.update_biome(payload.id, fields)
    if biome is None:
        raise NotFoundError("Biome", payload.id)
    return biome


async def delete_biome(biome_id: UUID) -> None:
    """
    Delete a biome. Its image rows cascade in the database; their files are
    removed here afterwards.
    """
    images = await images_repository.list_images_by_biomes([biome_id])
    if not await repository.delete_biome(biome_id):
        raise NotFoundError("Biome", biome_id)

    for image in images:
        await uploads.remove_upload(image["filename"])
    logger.info("Biome %s deleted (%d image file(s) removed)", biome_id, len(images))
