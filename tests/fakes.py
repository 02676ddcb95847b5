"""
In-memory stand-in for the feature repositories.

It mirrors the SQL schema closely enough for service and route tests:
unique emails/biome names, foreign keys, cascades, and ordering.
"""

from __future__ import annotations

import itertools
import uuid
from datetime import datetime, timedelta, timezone

from biome_images import repository as images_repository
from biomes import repository as biomes_repository
from comments import repository as comments_repository
from core.errors import ConflictError, NotFoundError
from posts import repository as posts_repository
from users import repository as users_repository

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)

PATCHED = {
    users_repository: (
        "create_user",
        "get_user_by_id",
        "get_user_by_email",
        "email_in_use",
        "list_users",
        "list_author_summaries",
        "update_user",
        "set_profile_image",
        "delete_user",
    ),
    biomes_repository: (
        "create_biome",
        "get_biome_by_id",
        "get_biome_by_name",
        "search_biome_by_name",
        "list_biomes",
        "list_biomes_by_ids",
        "update_biome",
        "delete_biome",
    ),
    posts_repository: (
        "create_post",
        "get_post_by_id",
        "list_posts",
        "list_posts_by_biomes",
        "list_posts_by_authors",
        "list_posts_by_ids",
        "update_post",
        "delete_post",
    ),
    comments_repository: (
        "create_comment",
        "get_comment_by_id",
        "list_top_level_for_posts",
        "list_replies_for_comments",
        "list_comments_for_posts",
        "list_comments_by_authors",
        "update_comment_content",
        "delete_comment",
    ),
    images_repository: (
        "create_image",
        "get_image_by_id",
        "list_images",
        "list_images_by_biomes",
        "update_image",
        "delete_image",
    ),
}


def _ids(values) -> set[str]:
    return {str(v) for v in values}


def _oldest_first(rows):
    return sorted(rows, key=lambda r: (r["created_at"], str(r["id"])))


def _newest_first(rows):
    return sorted(rows, key=lambda r: (r["created_at"], str(r["id"])), reverse=True)


class InMemoryStore:
    def __init__(self) -> None:
        self.users: dict[str, dict] = {}
        self.password_hashes: dict[str, str] = {}
        self.biomes: dict[str, dict] = {}
        self.posts: dict[str, dict] = {}
        self.comments: dict[str, dict] = {}
        self.images: dict[str, dict] = {}
        self._clock = itertools.count()

    def install(self, monkeypatch) -> None:
        for module, names in PATCHED.items():
            for name in names:
                monkeypatch.setattr(module, name, getattr(self, name))

    def _now(self) -> datetime:
        return BASE_TIME + timedelta(seconds=next(self._clock))

    def _new_row(self, **fields) -> dict:
        now = self._now()
        return {"id": uuid.uuid4(), **fields, "created_at": now, "updated_at": now}

    # users

    async def create_user(self, *, name, email, password_hash, is_admin=False):
        email = email.strip().lower()
        if any(u["email"] == email for u in self.users.values()):
            raise ConflictError("Email already registered.", field="email")
        row = self._new_row(name=name, email=email, is_admin=is_admin, profile_image=None)
        self.users[str(row["id"])] = row
        self.password_hashes[str(row["id"])] = password_hash
        return dict(row)

    async def get_user_by_id(self, user_id):
        row = self.users.get(str(user_id))
        return dict(row) if row else None

    async def get_user_by_email(self, email):
        email = email.strip().lower()
        for row in self.users.values():
            if row["email"] == email:
                return dict(row)
        return None

    async def email_in_use(self, email, *, exclude_user_id=None):
        row = await self.get_user_by_email(email)
        return row is not None and str(row["id"]) != str(exclude_user_id)

    async def list_users(self):
        return [dict(r) for r in _oldest_first(self.users.values())]

    async def list_author_summaries(self, user_ids):
        wanted = _ids(user_ids)
        return [
            {"id": r["id"], "name": r["name"], "profile_image": r["profile_image"]}
            for r in self.users.values()
            if str(r["id"]) in wanted
        ]

    async def update_user(self, user_id, fields):
        row = self.users.get(str(user_id))
        if row is None:
            return None
        fields = dict(fields)
        if "email" in fields and await self.email_in_use(fields["email"], exclude_user_id=user_id):
            raise ConflictError("Email already in use.", field="email")
        if "password_hash" in fields:
            self.password_hashes[str(user_id)] = fields.pop("password_hash")
        row.update(fields, updated_at=self._now())
        return dict(row)

    async def set_profile_image(self, user_id, filename):
        return await self.update_user(user_id, {"profile_image": filename})

    async def delete_user(self, user_id):
        key = str(user_id)
        if key not in self.users:
            return False
        for post in [p for p in self.posts.values() if str(p["author_id"]) == key]:
            await self.delete_post(post["id"])
        for comment in [c for c in self.comments.values() if str(c["author_id"]) == key]:
            await self.delete_comment(comment["id"])
        del self.users[key]
        self.password_hashes.pop(key, None)
        return True

    # biomes

    async def create_biome(self, **fields):
        if any(b["name"] == fields["name"] for b in self.biomes.values()):
            raise ConflictError(biomes_repository.NAME_TAKEN_MESSAGE, field="name")
        row = self._new_row(**fields)
        self.biomes[str(row["id"])] = row
        return dict(row)

    async def get_biome_by_id(self, biome_id):
        row = self.biomes.get(str(biome_id))
        return dict(row) if row else None

    async def get_biome_by_name(self, name):
        for row in self.biomes.values():
            if row["name"] == name:
                return dict(row)
        return None

    async def search_biome_by_name(self, fragment):
        matches = sorted(
            (b for b in self.biomes.values() if fragment.lower() in b["name"].lower()),
            key=lambda b: b["name"],
        )
        return dict(matches[0]) if matches else None

    async def list_biomes(self):
        return [dict(b) for b in sorted(self.biomes.values(), key=lambda b: b["name"])]

    async def list_biomes_by_ids(self, biome_ids):
        wanted = _ids(biome_ids)
        return [dict(b) for b in self.biomes.values() if str(b["id"]) in wanted]

    async def update_biome(self, biome_id, fields):
        row = self.biomes.get(str(biome_id))
        if row is None:
            return None
        name = fields.get("name")
        if name is not None and any(
            b["name"] == name and str(b["id"]) != str(biome_id) for b in self.biomes.values()
        ):
            raise ConflictError(biomes_repository.NAME_TAKEN_MESSAGE, field="name")
        row.update(fields, updated_at=self._now())
        return dict(row)

    async def delete_biome(self, biome_id):
        key = str(biome_id)
        if key not in self.biomes:
            return False
        for image_id in [i for i, img in self.images.items() if str(img["biome_id"]) == key]:
            del self.images[image_id]
        for post in self.posts.values():
            if str(post["biome_id"]) == key:
                post["biome_id"] = None
        del self.biomes[key]
        return True

    # posts

    async def create_post(self, *, title, content, author_id, biome_id=None):
        if str(author_id) not in self.users:
            raise NotFoundError("User")
        if biome_id is not None and str(biome_id) not in self.biomes:
            raise NotFoundError("Biome")
        row = self._new_row(title=title, content=content, author_id=author_id, biome_id=biome_id)
        self.posts[str(row["id"])] = row
        return dict(row)

    async def get_post_by_id(self, post_id):
        row = self.posts.get(str(post_id))
        return dict(row) if row else None

    async def list_posts(self):
        return [dict(p) for p in _newest_first(self.posts.values())]

    async def list_posts_by_biomes(self, biome_ids):
        wanted = _ids(biome_ids)
        return [dict(p) for p in _newest_first(self.posts.values()) if str(p["biome_id"]) in wanted]

    async def list_posts_by_authors(self, author_ids):
        wanted = _ids(author_ids)
        return [dict(p) for p in _newest_first(self.posts.values()) if str(p["author_id"]) in wanted]

    async def list_posts_by_ids(self, post_ids):
        wanted = _ids(post_ids)
        return [dict(p) for p in self.posts.values() if str(p["id"]) in wanted]

    async def update_post(self, post_id, fields):
        row = self.posts.get(str(post_id))
        if row is None:
            return None
        row.update(fields, updated_at=self._now())
        return dict(row)

    async def delete_post(self, post_id):
        key = str(post_id)
        if key not in self.posts:
            return False
        for comment in [c for c in self.comments.values() if str(c["post_id"]) == key]:
            await self.delete_comment(comment["id"])
        del self.posts[key]
        return True

    # comments

    async def create_comment(self, *, content, author_id, post_id, parent_comment_id=None):
        if str(post_id) not in self.posts:
            raise NotFoundError("Post")
        if str(author_id) not in self.users:
            raise NotFoundError("User")
        if parent_comment_id is not None and str(parent_comment_id) not in self.comments:
            raise NotFoundError("Parent comment")
        row = self._new_row(
            content=content,
            author_id=author_id,
            post_id=post_id,
            parent_comment_id=parent_comment_id,
        )
        self.comments[str(row["id"])] = row
        return dict(row)

    async def get_comment_by_id(self, comment_id):
        row = self.comments.get(str(comment_id))
        return dict(row) if row else None

    async def list_top_level_for_posts(self, post_ids):
        wanted = _ids(post_ids)
        return [
            dict(c)
            for c in _newest_first(self.comments.values())
            if str(c["post_id"]) in wanted and c["parent_comment_id"] is None
        ]

    async def list_replies_for_comments(self, parent_ids):
        wanted = _ids(parent_ids)
        return [
            dict(c)
            for c in _oldest_first(self.comments.values())
            if c["parent_comment_id"] is not None and str(c["parent_comment_id"]) in wanted
        ]

    async def list_comments_for_posts(self, post_ids):
        wanted = _ids(post_ids)
        return [dict(c) for c in _oldest_first(self.comments.values()) if str(c["post_id"]) in wanted]

    async def list_comments_by_authors(self, author_ids):
        wanted = _ids(author_ids)
        return [dict(c) for c in _newest_first(self.comments.values()) if str(c["author_id"]) in wanted]

    async def update_comment_content(self, comment_id, content):
        row = self.comments.get(str(comment_id))
        if row is None:
            return None
        row.update(content=content, updated_at=self._now())
        return dict(row)

    async def delete_comment(self, comment_id):
        key = str(comment_id)
        if key not in self.comments:
            return False
        for reply in [c for c in self.comments.values() if str(c["parent_comment_id"]) == key]:
            await self.delete_comment(reply["id"])
        del self.comments[key]
        return True

    # biome images

    async def create_image(self, *, filename, description, biome_id):
        if str(biome_id) not in self.biomes:
            raise NotFoundError("Biome", biome_id)
        now = self._now()
        row = {
            "id": uuid.uuid4(),
            "filename": filename,
            "description": description,
            "biome_id": biome_id,
            "created_at": now,
        }
        self.images[str(row["id"])] = row
        return dict(row)

    async def get_image_by_id(self, image_id):
        row = self.images.get(str(image_id))
        return dict(row) if row else None

    async def list_images(self):
        return [dict(i) for i in _oldest_first(self.images.values())]

    async def list_images_by_biomes(self, biome_ids):
        wanted = _ids(biome_ids)
        return [dict(i) for i in _oldest_first(self.images.values()) if str(i["biome_id"]) in wanted]

    async def update_image(self, image_id, fields):
        row = self.images.get(str(image_id))
        if row is None:
            return None
        row.update(fields)
        return dict(row)

    async def delete_image(self, image_id):
        row = self.images.pop(str(image_id), None)
        return dict(row) if row else None
