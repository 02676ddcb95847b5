"""
Post API schemas.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from comments.schemas import CommentThread
from core.schemas import ApiModel, AuthorSummary, BiomeRecord, PostRecord


class PostCreateRequest(ApiModel):
    title: str | None = None
    content: str | None = None
    author_id: UUID
    biome_id: UUID | None = None


class PostUpdateRequest(ApiModel):
    id: UUID
    # Acting user; must be the post's author.
    user_id: UUID
    title: str | None = None
    content: str | None = None
    biome_id: UUID | None = None


class PostDeleteRequest(ApiModel):
    id: UUID
    user_id: UUID


class PostDetail(PostRecord):
    author: AuthorSummary | None = None
    biome: BiomeRecord | None = None
    comments: list[CommentThread] = Field(default_factory=list)
