"""
User API schemas (request/response models).

Responses never carry the password or its hash.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, Field

from core.schemas import ApiModel, BiomeRecord, CommentRecord, PostRecord

# The admin flag has been sent as `adm` by older clients.
_ADMIN_ALIASES = AliasChoices("isAdmin", "adm", "is_admin")


class UserCreateRequest(ApiModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    is_admin: bool = Field(default=False, validation_alias=_ADMIN_ALIASES)


class UserUpdateRequest(ApiModel):
    id: UUID
    name: str | None = None
    email: str | None = None
    password: str | None = None
    is_admin: bool | None = Field(default=None, validation_alias=_ADMIN_ALIASES)


class UserDeleteRequest(ApiModel):
    id: UUID


class UserResponse(ApiModel):
    id: UUID
    name: str
    email: str
    is_admin: bool
    profile_image: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserPostResponse(PostRecord):
    biome: BiomeRecord | None = None
    comments: list[CommentRecord] = Field(default_factory=list)


class UserCommentResponse(CommentRecord):
    post: PostRecord | None = None
    replies: list[CommentRecord] = Field(default_factory=list)


class UserDetailResponse(UserResponse):
    posts: list[UserPostResponse] = Field(default_factory=list)
    comments: list[UserCommentResponse] = Field(default_factory=list)
