"""
Biome persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

import asyncpg

from core import db
from core.errors import ConflictError

BIOME_COLUMNS = (
    "id, name, introduction, general_characteristics, natural_resources, "
    "environmental_problems, conservation, created_at, updated_at"
)

TEXT_FIELDS = (
    "name",
    "introduction",
    "general_characteristics",
    "natural_resources",
    "environmental_problems",
    "conservation",
)


NAME_TAKEN_MESSAGE = "A biome with this name already exists."


async def create_biome(
    *,
    name: str,
    introduction: str,
    general_characteristics: str,
    natural_resources: str,
    environmental_problems: str,
    conservation: str,
) -> dict:
    try:
        row = await db.fetch_one(
            f"""
            INSERT INTO biomes (
              name, introduction, general_characteristics, natural_resources,
              environmental_problems, conservation
            )
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {BIOME_COLUMNS}
            """,
            name,
            introduction,
            general_characteristics,
            natural_resources,
            environmental_problems,
            conservation,
        )
    except asyncpg.UniqueViolationError as exc:
        raise ConflictError(NAME_TAKEN_MESSAGE, field="name") from exc
    if row is None:
        raise RuntimeError("Failed to create biome.")
    return row


async def get_biome_by_id(biome_id: UUID) -> dict | None:
    return await db.fetch_one(
        f"SELECT {BIOME_COLUMNS} FROM biomes WHERE id = $1",
        biome_id,
    )


async def get_biome_by_name(name: str) -> dict | None:
    """
    Exact, case-sensitive name lookup.
    """
    return await db.fetch_one(
        f"SELECT {BIOME_COLUMNS} FROM biomes WHERE name = $1",
        name,
    )


async def search_biome_by_name(fragment: str) -> dict | None:
    """
    First biome (by name) whose name contains `fragment`, ignoring case.

    `fragment` is matched literally; `%` and `_` are not wildcards.
    """
    return await db.fetch_one(
        f"""
        SELECT {BIOME_COLUMNS}
        FROM biomes
        WHERE strpos(lower(name), lower($1)) > 0
        ORDER BY name
        LIMIT 1
        """,
        fragment,
    )


async def list_biomes() -> list[dict]:
    return await db.fetch_all(f"SELECT {BIOME_COLUMNS} FROM biomes ORDER BY name")


async def list_biomes_by_ids(biome_ids: list[UUID]) -> list[dict]:
    if not biome_ids:
        return []
    return await db.fetch_all(
        f"SELECT {BIOME_COLUMNS} FROM biomes WHERE id = ANY($1::uuid[])",
        list(biome_ids),
    )


async def update_biome(biome_id: UUID, fields: dict[str, Any]) -> dict | None:
    if not fields:
        return await get_biome_by_id(biome_id)

    assignments, args = db.set_clause(fields, allowed=TEXT_FIELDS)
    try:
        return await db.fetch_one(
            f"""
            UPDATE biomes
            SET {assignments},
                updated_at = now()
            WHERE id = $1
            RETURNING {BIOME_COLUMNS}
            """,
            biome_id,
            *args,
        )
    except asyncpg.UniqueViolationError as exc:
        raise ConflictError(NAME_TAKEN_MESSAGE, field="name") from exc


async def delete_biome(biome_id: UUID) -> bool:
    """
    Delete a biome; its images go with it and its posts lose the biome link.
    """
    status = await db.execute("DELETE FROM biomes WHERE id = $1", biome_id)
    return db.affected_rows(status) > 0
