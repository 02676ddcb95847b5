"""
Base schema and the flat record shapes shared by several features.

JSON uses camelCase (`biomeId`, `createdAt`); Python code uses snake_case.
Request models accept both spellings. Feature packages compose these records
into their nested responses (post -> comments -> replies, biome -> posts).
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(ApiModel):
    message: str


class AuthorSummary(ApiModel):
    id: UUID
    name: str
    profile_image: str | None = None


class BiomeRecord(ApiModel):
    id: UUID
    name: str
    introduction: str
    general_characteristics: str
    natural_resources: str
    environmental_problems: str
    conservation: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PostRecord(ApiModel):
    id: UUID
    title: str
    content: str
    author_id: UUID
    biome_id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CommentRecord(ApiModel):
    id: UUID
    content: str
    author_id: UUID
    post_id: UUID
    parent_comment_id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BiomeImageRecord(ApiModel):
    id: UUID
    filename: str
    description: str | None = None
    biome_id: UUID
    created_at: datetime | None = None
