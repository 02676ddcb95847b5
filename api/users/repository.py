"""
User persistence helpers.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

import asyncpg

from core import db
from core.errors import ConflictError
from core.validators import normalize_email

USER_COLUMNS = "id, name, email, is_admin, profile_image, created_at, updated_at"

UPDATABLE_COLUMNS = ("name", "email", "password_hash", "is_admin", "profile_image")


async def create_user(*, name: str, email: str, password_hash: str, is_admin: bool = False) -> dict:
    try:
        row = await db.fetch_one(
            f"""
            INSERT INTO users (name, email, password_hash, is_admin)
            VALUES ($1, $2, $3, $4)
            RETURNING {USER_COLUMNS}
            """,
            name,
            normalize_email(email),
            password_hash,
            is_admin,
        )
    except asyncpg.UniqueViolationError as exc:
        raise ConflictError("Email already registered.", field="email") from exc
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_id(user_id: UUID) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {USER_COLUMNS}
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {USER_COLUMNS}
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def email_in_use(email: str, *, exclude_user_id: UUID | None = None) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM users
        WHERE lower(email) = lower($1)
          AND ($2::uuid IS NULL OR id <> $2::uuid)
        LIMIT 1
        """,
        normalize_email(email),
        exclude_user_id,
    )
    return row is not None


async def list_users() -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {USER_COLUMNS}
        FROM users
        ORDER BY created_at, id
        """
    )


async def list_author_summaries(user_ids: list[UUID]) -> list[dict]:
    """
    Public author fields (id, name, profile_image) for a batch of users.
    """
    if not user_ids:
        return []
    return await db.fetch_all(
        """
        SELECT id, name, profile_image
        FROM users
        WHERE id = ANY($1::uuid[])
        """,
        list(user_ids),
    )


async def update_user(user_id: UUID, fields: dict[str, Any]) -> dict | None:
    """
    Partial update. Returns the updated row, or None when the user is gone.
    """
    if not fields:
        return await get_user_by_id(user_id)

    assignments, args = db.set_clause(fields, allowed=UPDATABLE_COLUMNS)
    try:
        return await db.fetch_one(
            f"""
            UPDATE users
            SET {assignments},
                updated_at = now()
            WHERE id = $1
            RETURNING {USER_COLUMNS}
            """,
            user_id,
            *args,
        )
    except asyncpg.UniqueViolationError as exc:
        raise ConflictError("Email already in use.", field="email") from exc


async def set_profile_image(user_id: UUID, filename: str) -> dict | None:
    return await update_user(user_id, {"profile_image": filename})


async def delete_user(user_id: UUID) -> bool:
    """
    Delete a user; posts and comments go with it (ON DELETE CASCADE).
    """
    status = await db.execute("DELETE FROM users WHERE id = $1", user_id)
    return db.affected_rows(status) > 0
