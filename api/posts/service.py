"""
Post business logic.

Every post leaving this module is expanded with:
- author: public summary (id, name, profile_image)
- biome: the full biome row, or None
- comments: top-level threads with one level of replies
"""

from __future__ import annotations

from uuid import UUID

from biomes import repository as biomes_repository
from comments import service as comments_service
from core import db
from core.errors import NotFoundError
from core.logging_config import get_logger
from core.validators import clean_text, ensure_owner, require_fields
from users import repository as users_repository

from . import repository, schemas

logger = get_logger("posts")


def _key(value: object) -> str:
    return str(value)


async def expand_posts(rows: list[dict]) -> list[dict]:
    if not rows:
        return []

    authors = await users_repository.list_author_summaries(db.unique_ids(r["author_id"] for r in rows))
    biomes = await biomes_repository.list_biomes_by_ids(db.unique_ids(r["biome_id"] for r in rows))
    threads = await comments_service.threads_by_post([r["id"] for r in rows])

    authors_by_id = {_key(a["id"]): a for a in authors}
    biomes_by_id = {_key(b["id"]): b for b in biomes}
    return [
        {
            **row,
            "author": authors_by_id.get(_key(row["author_id"])),
            "biome": biomes_by_id.get(_key(row["biome_id"])) if row["biome_id"] is not None else None,
            "comments": threads.get(_key(row["id"]), []),
        }
        for row in rows
    ]


async def _expand_one(row: dict) -> dict:
    expanded = await expand_posts([row])
    return expanded[0]


async def _require_biome(biome_id: UUID) -> None:
    if await biomes_repository.get_biome_by_id(biome_id) is None:
        raise NotFoundError("Biome", biome_id)


async def list_posts() -> list[dict]:
    return await expand_posts(await repository.list_posts())


async def get_post(post_id: UUID) -> dict:
    row = await repository.get_post_by_id(post_id)
    if row is None:
        raise NotFoundError("Post", post_id)
    return await _expand_one(row)


async def list_posts_by_biome(biome_id: UUID) -> list[dict]:
    """
    Posts of one biome, newest first. An existing biome without posts gives [].
    """
    await _require_biome(biome_id)
    return await expand_posts(await repository.list_posts_by_biomes([biome_id]))


async def create_post(payload: schemas.PostCreateRequest) -> dict:
    require_fields(
        {"title": payload.title, "content": payload.content},
        message="Title and content are required.",
    )

    if await users_repository.get_user_by_id(payload.author_id) is None:
        raise NotFoundError("User", payload.author_id)
    if payload.biome_id is not None:
        await _require_biome(payload.biome_id)

    row = await repository.create_post(
        title=clean_text(payload.title, "title"),
        content=clean_text(payload.content, "content"),
        author_id=payload.author_id,
        biome_id=payload.biome_id,
    )
    logger.info("Post %s created by user %s", row["id"], row["author_id"])
    return await _expand_one(row)


async def update_post(payload: schemas.PostUpdateRequest) -> dict:
    existing = await repository.get_post_by_id(payload.id)
    if existing is None:
        raise NotFoundError("Post", payload.id)
    ensure_owner(existing["author_id"], payload.user_id, "Not authorized to update this post.")

    supplied = payload.model_fields_set
    fields: dict = {}
    if "title" in supplied:
        fields["title"] = clean_text(payload.title, "title")
    if "content" in supplied:
        fields["content"] = clean_text(payload.content, "content")
    if "biome_id" in supplied:
        # An explicit null detaches the post from its biome.
        if payload.biome_id is not None:
            await _require_biome(payload.biome_id)
        fields["biome_id"] = payload.biome_id

    row = await repository.update_post(payload.id, fields)
    if row is None:
        raise NotFoundError("Post", payload.id)
    return await _expand_one(row)


async def delete_post(payload: schemas.PostDeleteRequest) -> dict:
    existing = await repository.get_post_by_id(payload.id)
    if existing is None:
        raise NotFoundError("Post", payload.id)
    ensure_owner(existing["author_id"], payload.user_id, "Not authorized to delete this post.")

    if not await repository.delete_post(payload.id):
        raise NotFoundError("Post", payload.id)
    logger.info("Post %s deleted", payload.id)
    return {"message": "Post deleted successfully."}
