"""
Biome image persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

import asyncpg

from core import db
from core.errors import NotFoundError

IMAGE_COLUMNS = "id, filename, description, biome_id, created_at"

UPDATABLE_COLUMNS = ("filename", "description", "biome_id")


async def create_image(*, filename: str, description: str | None, biome_id: UUID) -> dict:
    try:
        row = await db.fetch_one(
            f"""
            INSERT INTO biome_images (filename, description, biome_id)
            VALUES ($1, $2, $3)
            RETURNING {IMAGE_COLUMNS}
            """,
            filename,
            description,
            biome_id,
        )
    except asyncpg.ForeignKeyViolationError as exc:
        raise NotFoundError("Biome", biome_id) from exc
    if row is None:
        raise RuntimeError("Failed to create biome image.")
    return row


async def get_image_by_id(image_id: UUID) -> dict | None:
    return await db.fetch_one(
        f"SELECT {IMAGE_COLUMNS} FROM biome_images WHERE id = $1",
        image_id,
    )


async def list_images() -> list[dict]:
    return await db.fetch_all(
        f"SELECT {IMAGE_COLUMNS} FROM biome_images ORDER BY created_at, id"
    )


async def list_images_by_biomes(biome_ids: list[UUID]) -> list[dict]:
    if not biome_ids:
        return []
    return await db.fetch_all(
        f"""
        SELECT {IMAGE_COLUMNS}
        FROM biome_images
        WHERE biome_id = ANY($1::uuid[])
        ORDER BY created_at, id
        """,
        list(biome_ids),
    )


async def update_image(image_id: UUID, fields: dict[str, Any]) -> dict | None:
    if not fields:
        return await get_image_by_id(image_id)

    assignments, args = db.set_clause(fields, allowed=UPDATABLE_COLUMNS)
    try:
        return await db.fetch_one(
            f"""
            UPDATE biome_images
            SET {assignments}
            WHERE id = $1
            RETURNING {IMAGE_COLUMNS}
            """,
            image_id,
            *args,
        )
    except asyncpg.ForeignKeyViolationError as exc:
        raise NotFoundError("Biome", fields.get("biome_id")) from exc


async def delete_image(image_id: UUID) -> dict | None:
    """
    Delete an image row. Returns the deleted row (for file cleanup) or None.
    """
    return await db.fetch_one(
        f"DELETE FROM biome_images WHERE id = $1 RETURNING {IMAGE_COLUMNS}",
        image_id,
    )
