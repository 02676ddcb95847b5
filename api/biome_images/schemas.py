"""
Biome image API schemas.
"""

from __future__ import annotations

from uuid import UUID

from core.schemas import ApiModel, BiomeImageRecord, BiomeRecord


class BiomeImageDeleteRequest(ApiModel):
    id: UUID


class BiomeImageResponse(BiomeImageRecord):
    biome: BiomeRecord | None = None
