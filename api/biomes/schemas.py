"""
Biome API schemas.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from core.schemas import ApiModel, BiomeImageRecord, BiomeRecord, PostRecord
from posts.schemas import PostDetail


class BiomeCreateRequest(ApiModel):
    name: str | None = None
    introduction: str | None = None
    general_characteristics: str | None = None
    natural_resources: str | None = None
    environmental_problems: str | None = None
    conservation: str | None = None


class BiomeUpdateRequest(BiomeCreateRequest):
    id: UUID


class BiomeDeleteRequest(ApiModel):
    id: UUID


class BiomeSearchRequest(ApiModel):
    name: str | None = None


class BiomeSummary(BiomeRecord):
    images: list[BiomeImageRecord] = Field(default_factory=list)
    posts: list[PostRecord] = Field(default_factory=list)


class BiomeDetail(BiomeRecord):
    images: list[BiomeImageRecord] = Field(default_factory=list)
    posts: list[PostDetail] = Field(default_factory=list)
