"""
Post persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

import asyncpg

from core import db
from core.errors import NotFoundError

POST_COLUMNS = "id, title, content, author_id, biome_id, created_at, updated_at"

UPDATABLE_COLUMNS = ("title", "content", "biome_id")


def _missing_reference(exc: asyncpg.ForeignKeyViolationError) -> NotFoundError:
    # Default constraint names: posts_author_id_fkey / posts_biome_id_fkey.
    constraint = getattr(exc, "constraint_name", None) or ""
    return NotFoundError("User" if "author" in constraint else "Biome")


async def create_post(
    *,
    title: str,
    content: str,
    author_id: UUID,
    biome_id: UUID | None = None,
) -> dict:
    try:
        row = await db.fetch_one(
            f"""
            INSERT INTO posts (title, content, author_id, biome_id)
            VALUES ($1, $2, $3, $4)
            RETURNING {POST_COLUMNS}
            """,
            title,
            content,
            author_id,
            biome_id,
        )
    except asyncpg.ForeignKeyViolationError as exc:
        raise _missing_reference(exc) from exc
    if row is None:
        raise RuntimeError("Failed to create post.")
    return row


async def get_post_by_id(post_id: UUID) -> dict | None:
    return await db.fetch_one(
        f"SELECT {POST_COLUMNS} FROM posts WHERE id = $1",
        post_id,
    )


async def list_posts() -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {POST_COLUMNS}
        FROM posts
        ORDER BY created_at DESC, id DESC
        """
    )


async def list_posts_by_biomes(biome_ids: list[UUID]) -> list[dict]:
    if not biome_ids:
        return []
    return await db.fetch_all(
        f"""
        SELECT {POST_COLUMNS}
        FROM posts
        WHERE biome_id = ANY($1::uuid[])
        ORDER BY created_at DESC, id DESC
        """,
        list(biome_ids),
    )


async def list_posts_by_authors(author_ids: list[UUID]) -> list[dict]:
    if not author_ids:
        return []
    return await db.fetch_all(
        f"""
        SELECT {POST_COLUMNS}
        FROM posts
        WHERE author_id = ANY($1::uuid[])
        ORDER BY created_at DESC, id DESC
        """,
        list(author_ids),
    )


async def list_posts_by_ids(post_ids: list[UUID]) -> list[dict]:
    if not post_ids:
        return []
    return await db.fetch_all(
        f"SELECT {POST_COLUMNS} FROM posts WHERE id = ANY($1::uuid[])",
        list(post_ids),
    )


async def update_post(post_id: UUID, fields: dict[str, Any]) -> dict | None:
    if not fields:
        return await get_post_by_id(post_id)

    assignments, args = db.set_clause(fields, allowed=UPDATABLE_COLUMNS)
    try:
        return await db.fetch_one(
            f"""
            UPDATE posts
            SET {assignments},
                updated_at = now()
            WHERE id = $1
            RETURNING {POST_COLUMNS}
            """,
            post_id,
            *args,
        )
    except asyncpg.ForeignKeyViolationError as exc:
        raise _missing_reference(exc) from exc


async def delete_post(post_id: UUID) -> bool:
    """
    Delete a post; its comments go with it (ON DELETE CASCADE).
    """
    status = await db.execute("DELETE FROM posts WHERE id = $1", post_id)
    return db.affected_rows(status) > 0
