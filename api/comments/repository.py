"""
Comment persistence (raw SQL).

Comments form a two-level tree: top-level comments have
`parent_comment_id IS NULL`, replies point at their parent.
"""

from __future__ import annotations

from uuid import UUID

import asyncpg

from core import db
from core.errors import NotFoundError

COMMENT_COLUMNS = "id, content, author_id, post_id, parent_comment_id, created_at, updated_at"


def _missing_reference(exc: asyncpg.ForeignKeyViolationError) -> NotFoundError:
    constraint = getattr(exc, "constraint_name", None) or ""
    if "author" in constraint:
        return NotFoundError("User")
    if "parent" in constraint:
        return NotFoundError("Parent comment")
    return NotFoundError("Post")


async def create_comment(
    *,
    content: str,
    author_id: UUID,
    post_id: UUID,
    parent_comment_id: UUID | None = None,
) -> dict:
    try:
        row = await db.fetch_one(
            f"""
            INSERT INTO comments (content, author_id, post_id, parent_comment_id)
            VALUES ($1, $2, $3, $4)
            RETURNING {COMMENT_COLUMNS}
            """,
            content,
            author_id,
            post_id,
            parent_comment_id,
        )
    except asyncpg.ForeignKeyViolationError as exc:
        raise _missing_reference(exc) from exc
    if row is None:
        raise RuntimeError("Failed to create comment.")
    return row


async def get_comment_by_id(comment_id: UUID) -> dict | None:
    return await db.fetch_one(
        f"SELECT {COMMENT_COLUMNS} FROM comments WHERE id = $1",
        comment_id,
    )


async def list_top_level_for_posts(post_ids: list[UUID]) -> list[dict]:
    """
    Top-level comments of the given posts, newest first.
    """
    if not post_ids:
        return []
    return await db.fetch_all(
        f"""
        SELECT {COMMENT_COLUMNS}
        FROM comments
        WHERE post_id = ANY($1::uuid[])
          AND parent_comment_id IS NULL
        ORDER BY created_at DESC, id DESC
        """,
        list(post_ids),
    )


async def list_replies_for_comments(parent_ids: list[UUID]) -> list[dict]:
    """
    Direct replies of the given comments, oldest first.
    """
    if not parent_ids:
        return []
    return await db.fetch_all(
        f"""
        SELECT {COMMENT_COLUMNS}
        FROM comments
        WHERE parent_comment_id = ANY($1::uuid[])
        ORDER BY created_at, id
        """,
        list(parent_ids),
    )


async def list_comments_for_posts(post_ids: list[UUID]) -> list[dict]:
    """
    Every comment (top-level and replies) of the given posts, oldest first.
    """
    if not post_ids:
        return []
    return await db.fetch_all(
        f"""
        SELECT {COMMENT_COLUMNS}
        FROM comments
        WHERE post_id = ANY($1::uuid[])
        ORDER BY created_at, id
        """,
        list(post_ids),
    )


async def list_comments_by_authors(author_ids: list[UUID]) -> list[dict]:
    if not author_ids:
        return []
    return await db.fetch_all(
        f"""
        SELECT {COMMENT_COLUMNS}
        FROM comments
        WHERE author_id = ANY($1::uuid[])
        ORDER BY created_at DESC, id DESC
        """,
        list(author_ids),
    )


async def update_comment_content(comment_id: UUID, content: str) -> dict | None:
    return await db.fetch_one(
        f"""
        UPDATE comments
        SET content = $2,
            updated_at = now()
        WHERE id = $1
        RETURNING {COMMENT_COLUMNS}
        """,
        comment_id,
        content,
    )


async def delete_comment(comment_id: UUID) -> bool:
    """
    Delete a comment; its replies go with it (ON DELETE CASCADE).
    """
    status = await db.execute("DELETE FROM comments WHERE id = $1", comment_id)
    return db.affected_rows(status) > 0
