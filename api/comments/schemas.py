"""
Comment API schemas.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from core.schemas import ApiModel, AuthorSummary, CommentRecord


class CommentCreateRequest(ApiModel):
    content: str | None = None
    post_id: UUID
    author_id: UUID
    parent_comment_id: UUID | None = None


class CommentUpdateRequest(ApiModel):
    id: UUID
    author_id: UUID
    content: str | None = None


class CommentDeleteRequest(ApiModel):
    id: UUID
    author_id: UUID


class CommentWithAuthor(CommentRecord):
    author: AuthorSummary | None = None


class CommentThread(CommentWithAuthor):
    """
    A top-level comment with its direct replies (one level only).
    """

    replies: list[CommentWithAuthor] = Field(default_factory=list)
