"""Pydantic schemas for the comment system.

- ``CommentRequest``: a submission on its way through moderation
- Projections returned by the service for public and admin listings
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


# ==============================================================================
# Request Schemas
# ==============================================================================


class CommentRequest(BaseModel):
    """Comment submitted by a reader."""

    post_id: UUID
    username: str = Field(..., min_length=1, max_length=64)
    email: EmailStr
    ip_address: str = Field(..., min_length=1, max_length=64)
    content: str = Field(..., min_length=1, max_length=4096)

    @field_validator("username", "content")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Strip whitespace and reject blank values."""
        v = v.strip()
        if not v:
            msg = "Value cannot be empty"
            raise ValueError(msg)
        return v


# ==============================================================================
# Projections
# ==============================================================================


class CommentReplyDigest(BaseModel):
    """Reply as shown under its comment."""

    reply_content: str
    reply_time_utc: datetime

    @classmethod
    def from_reply(cls, reply: Any) -> "CommentReplyDigest":
        return cls(
            reply_content=reply.reply_content,
            reply_time_utc=reply.create_time_utc,
        )


class PublicComment(BaseModel):
    """Approved comment as rendered under a post."""

    model_config = ConfigDict(from_attributes=True)

    username: str
    email: str
    comment_content: str
    create_time_utc: datetime
    comment_replies: list[CommentReplyDigest] = Field(default_factory=list)

    @classmethod
    def from_comment(cls, comment: Any) -> "PublicComment":
        return cls(
            username=comment.username,
            email=comment.email,
            comment_content=comment.comment_content,
            create_time_utc=comment.create_time_utc,
        )


class CommentDetailedItem(BaseModel):
    """Comment with everything the moderation screen shows."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    ip_address: str
    comment_content: str
    create_time_utc: datetime
    is_approved: bool
    post_title: str | None = None
    comment_replies: list[CommentReplyDigest] = Field(default_factory=list)

    @classmethod
    def from_comment(
        cls, comment: Any, post_title: str | None = None
    ) -> "CommentDetailedItem":
        """Create item from Comment entity.

        Args:
            comment: Comment entity
            post_title: Title of the owning post, resolved by the caller
        """
        return cls(
            id=comment.id,
            username=comment.username,
            email=comment.email,
            ip_address=comment.ip_address,
            comment_content=comment.comment_content,
            create_time_utc=comment.create_time_utc,
            is_approved=comment.is_approved,
            post_title=post_title,
        )


class CommentReplyDetail(BaseModel):
    """A newly added reply together with the comment and post it belongs to."""

    id: UUID
    comment_id: UUID
    post_id: UUID
    reply_content: str
    reply_time_utc: datetime
    comment_content: str
    email: str
    create_time_utc: datetime
    title: str | None = None
    slug: str | None = None

    @classmethod
    def from_reply(
        cls, reply: Any, comment: Any, post: Any | None = None
    ) -> "CommentReplyDetail":
        return cls(
            id=reply.id,
            comment_id=comment.id,
            post_id=comment.post_id,
            reply_content=reply.reply_content,
            reply_time_utc=reply.create_time_utc,
            comment_content=comment.comment_content,
            email=comment.email,
            create_time_utc=comment.create_time_utc,
            title=post.title if post else None,
            slug=post.slug if post else None,
        )
