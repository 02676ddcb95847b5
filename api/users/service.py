"""
User business logic.
"""

from __future__ import annotations

from collections import defaultdict
from uuid import UUID

from biomes import repository as biomes_repository
from comments import repository as comments_repository
from core import db, uploads
from core.errors import ConflictError, NotFoundError
from core.logging_config import get_logger
from core.validators import clean_text, require_fields, validate_email, validate_password
from posts import repository as posts_repository

from . import repository, schemas, security

logger = get_logger("users")


def _key(value: object) -> str:
    return str(value)


async def _expand_users(users: list[dict]) -> list[dict]:
    """
    Attach each user's posts (with biome and flat comments) and comments
    (with their post and direct replies).
    """
    if not users:
        return []

    user_ids = db.unique_ids(u["id"] for u in users)
    posts = await posts_repository.list_posts_by_authors(user_ids)
    comments = await comments_repository.list_comments_by_authors(user_ids)

    biomes = await biomes_repository.list_biomes_by_ids(db.unique_ids(p["biome_id"] for p in posts))
    post_comments = await comments_repository.list_comments_for_posts(db.unique_ids(p["id"] for p in posts))
    commented_posts = await posts_repository.list_posts_by_ids(db.unique_ids(c["post_id"] for c in comments))
    replies = await comments_repository.list_replies_for_comments(db.unique_ids(c["id"] for c in comments))

    biomes_by_id = {_key(b["id"]): b for b in biomes}
    commented_posts_by_id = {_key(p["id"]): p for p in commented_posts}

    comments_by_post: dict[str, list[dict]] = defaultdict(list)
    for comment in post_comments:
        comments_by_post[_key(comment["post_id"])].append(comment)

    replies_by_parent: dict[str, list[dict]] = defaultdict(list)
    for reply in replies:
        replies_by_parent[_key(reply["parent_comment_id"])].append(reply)

    posts_by_author: dict[str, list[dict]] = defaultdict(list)
    for post in posts:
        posts_by_author[_key(post["author_id"])].append(
            {
                **post,
                "biome": biomes_by_id.get(_key(post["biome_id"])) if post["biome_id"] is not None else None,
                "comments": comments_by_post.get(_key(post["id"]), []),
            }
        )

    comments_by_author: dict[str, list[dict]] = defaultdict(list)
    for comment in comments:
        comments_by_author[_key(comment["author_id"])].append(
            {
                **comment,
                "post": commented_posts_by_id.get(_key(comment["post_id"])),
                "replies": replies_by_parent.get(_key(comment["id"]), []),
            }
        )

    return [
        {
            **user,
            "posts": posts_by_author.get(_key(user["id"]), []),
            "comments": comments_by_author.get(_key(user["id"]), []),
        }
        for user in users
    ]


async def create_user(payload: schemas.UserCreateRequest) -> dict:
    require_fields(
        {"name": payload.name, "email": payload.email, "password": payload.password},
        message="Name, email, and password are required.",
    )
    password = validate_password(payload.password)
    email = validate_email(payload.email)

    if await repository.email_in_use(email):
        raise ConflictError("Email already registered.", field="email")

    user = await repository.create_user(
        name=clean_text(payload.name, "name"),
        email=email,
        password_hash=security.hash_password(password),
        is_admin=bool(payload.is_admin),
    )
    logger.info("User %s created", user["id"])
    return user


async def get_user(user_id: UUID) -> dict:
    user = await repository.get_user_by_id(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    expanded = await _expand_users([user])
    return expanded[0]


async def list_users() -> list[dict]:
    return await _expand_users(await repository.list_users())


async def update_user(payload: schemas.UserUpdateRequest) -> dict:
    existing = await repository.get_user_by_id(payload.id)
    if existing is None:
        raise NotFoundError("User", payload.id)

    supplied = payload.model_fields_set
    fields: dict = {}
    if "name" in supplied:
        fields["name"] = clean_text(payload.name, "name")
    if "email" in supplied:
        email = validate_email(payload.email)
        if await repository.email_in_use(email, exclude_user_id=payload.id):
            raise ConflictError("Email already in use.", field="email")
        fields["email"] = email
    if "password" in supplied:
        fields["password_hash"] = security.hash_password(validate_password(payload.password))
    if "is_admin" in supplied and payload.is_admin is not None:
        fields["is_admin"] = bool(payload.is_admin)

    user = await repository.update_user(payload.id, fields)
    if user is None:
        raise NotFoundError("User", payload.id)
    return user


async def delete_user(user_id: UUID) -> dict:
    """
    Delete a user; posts and comments cascade, the profile image file is removed.
    """
    existing = await repository.get_user_by_id(user_id)
    if existing is None or not await repository.delete_user(user_id):
        raise NotFoundError("User", user_id)

    await uploads.remove_upload(existing.get("profile_image"))
    logger.info("User %s deleted with their posts and comments", user_id)
    return {"message": "User deleted successfully."}


async def set_profile_image(user_id: UUID, filename: str) -> dict:
    """
    Point the user's profile image at an already stored upload.

    The previous image file is removed once the new one is saved.
    """
    existing = await repository.get_user_by_id(user_id)
    if existing is None:
        raise NotFoundError("User", user_id)

    user = await repository.set_profile_image(user_id, filename)
    if user is None:
        raise NotFoundError("User", user_id)

    previous = existing.get("profile_image")
    if previous and previous != filename:
        await uploads.remove_upload(previous)
    return user
