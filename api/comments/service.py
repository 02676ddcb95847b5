"""
Comment business logic.

Comments are read as threads: a top-level comment (newest first) carrying
its direct replies (oldest first). A reply to a reply is stored under the
top-level comment of that thread.
"""

from __future__ import annotations

from collections import defaultdict
from uuid import UUID

from core import db
from core.errors import NotFoundError, ValidationError
from core.logging_config import get_logger
from core.validators import clean_text, ensure_owner
from posts import repository as posts_repository
from users import repository as users_repository

from . import repository, schemas

logger = get_logger("comments")


def _key(value: object) -> str:
    return str(value)


async def _authors_by_id(rows: list[dict]) -> dict[str, dict]:
    author_ids = db.unique_ids(row["author_id"] for row in rows)
    authors = await users_repository.list_author_summaries(author_ids)
    return {_key(author["id"]): author for author in authors}


async def build_threads(top_level: list[dict]) -> list[dict]:
    """
    Attach author summaries and one level of replies to top-level comments.

    The input order is kept.
    """
    if not top_level:
        return []

    replies = await repository.list_replies_for_comments(db.unique_ids(c["id"] for c in top_level))
    authors = await _authors_by_id([*top_level, *replies])

    replies_by_parent: dict[str, list[dict]] = defaultdict(list)
    for reply in replies:
        replies_by_parent[_key(reply["parent_comment_id"])].append(
            {**reply, "author": authors.get(_key(reply["author_id"]))}
        )

    return [
        {
            **comment,
            "author": authors.get(_key(comment["author_id"])),
            "replies": replies_by_parent.get(_key(comment["id"]), []),
        }
        for comment in top_level
    ]


async def threads_by_post(post_ids: list[UUID]) -> dict[str, list[dict]]:
    """
    Comment threads for several posts, keyed by str(post_id).
    """
    top_level = await repository.list_top_level_for_posts(db.unique_ids(post_ids))
    grouped: dict[str, list[dict]] = defaultdict(list)
    for thread in await build_threads(top_level):
        grouped[_key(thread["post_id"])].append(thread)
    return grouped


async def list_post_comments(post_id: UUID) -> list[dict]:
    post = await posts_repository.get_post_by_id(post_id)
    if post is None:
        raise NotFoundError("Post", post_id)

    threads = await threads_by_post([post_id])
    return threads.get(_key(post_id), [])


async def create_comment(payload: schemas.CommentCreateRequest) -> dict:
    content = clean_text(payload.content, "content")

    post = await posts_repository.get_post_by_id(payload.post_id)
    if post is None:
        raise NotFoundError("Post", payload.post_id)

    author = await users_repository.get_user_by_id(payload.author_id)
    if author is None:
        raise NotFoundError("User", payload.author_id)

    parent_comment_id = payload.parent_comment_id
    if parent_comment_id is not None:
        parent = await repository.get_comment_by_id(payload.parent_comment_id)
        if parent is None:
            raise NotFoundError("Parent comment", payload.parent_comment_id)
        if _key(parent["post_id"]) != _key(payload.post_id):
            raise ValidationError(
                "Parent comment belongs to a different post.",
                field="parentCommentId",
            )
        # Threads are one level deep: a reply to a reply joins the top-level thread.
        if parent["parent_comment_id"] is not None:
            parent_comment_id = parent["parent_comment_id"]

    row = await repository.create_comment(
        content=content,
        author_id=payload.author_id,
        post_id=payload.post_id,
        parent_comment_id=parent_comment_id,
    )
    logger.info("Comment %s created on post %s", row["id"], row["post_id"])
    threads = await build_threads([row])
    return threads[0]


async def update_comment(payload: schemas.CommentUpdateRequest) -> dict:
    content = clean_text(payload.content, "content")

    existing = await repository.get_comment_by_id(payload.id)
    if existing is None:
        raise NotFoundError("Comment", payload.id)
    ensure_owner(existing["author_id"], payload.author_id, "Not authorized to update this comment.")

    row = await repository.update_comment_content(payload.id, content)
    if row is None:
        raise NotFoundError("Comment", payload.id)
    threads = await build_threads([row])
    return threads[0]


async def delete_comment(payload: schemas.CommentDeleteRequest) -> dict:
    existing = await repository.get_comment_by_id(payload.id)
    if existing is None:
        raise NotFoundError("Comment", payload.id)
    ensure_owner(existing["author_id"], payload.author_id, "Not authorized to delete this comment.")

    if not await repository.delete_comment(payload.id):
        raise NotFoundError("Comment", payload.id)
    logger.info("Comment %s deleted", payload.id)
    return {"message": "Comment deleted successfully."}
