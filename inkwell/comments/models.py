"""Database models for blog comments.

Cassandra table definitions and entities for:
- Comments: reader comments on a post, pending until approved
- Comment replies: administrator replies, owned by a comment
- Posts: looked up for their title and slug only, never written here

Every table is partitioned by ``id``. Secondary indexes on ``post_id`` and
``comment_id`` serve the per-post listing and reply lookups.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

COMMENT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments (
    id UUID PRIMARY KEY,
    post_id UUID,
    username TEXT,
    email TEXT,
    ip_address TEXT,
    comment_content TEXT,
    create_time_utc TIMESTAMP,
    is_approved BOOLEAN,
    moderation TEXT
)
"""

COMMENT_POST_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS comments_post_idx
ON {keyspace}.comments (post_id)
"""

COMMENT_REPLY_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comment_replies (
    id UUID PRIMARY KEY,
    comment_id UUID,
    reply_content TEXT,
    create_time_utc TIMESTAMP
)
"""

COMMENT_REPLY_COMMENT_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS comment_replies_comment_idx
ON {keyspace}.comment_replies (comment_id)
"""

# Owned by the post module; created here so a bare keyspace is usable.
POST_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.posts (
    id UUID PRIMARY KEY,
    title TEXT,
    slug TEXT,
    is_deleted BOOLEAN
)
"""

COMMENTS_TABLES_CQL = [
    COMMENT_TABLE_CQL,
    COMMENT_POST_INDEX_CQL,
    COMMENT_REPLY_TABLE_CQL,
    COMMENT_REPLY_COMMENT_INDEX_CQL,
    POST_TABLE_CQL,
]

COMMENT_COLUMNS = (
    "id",
    "post_id",
    "username",
    "email",
    "ip_address",
    "comment_content",
    "create_time_utc",
    "is_approved",
    "moderation",
)
COMMENT_REPLY_COLUMNS = ("id", "comment_id", "reply_content", "create_time_utc")
POST_COLUMNS = ("id", "title", "slug", "is_deleted")


def _as_utc(value: datetime) -> datetime:
    # The driver returns naive datetimes for TIMESTAMP columns
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class Comment:
    """Reader comment on a post."""

    id: UUID
    post_id: UUID
    username: str
    email: str
    ip_address: str
    comment_content: str
    create_time_utc: datetime
    is_approved: bool
    moderation: str | None = None

    @classmethod
    def from_row(cls, row: Any) -> "Comment":
        """Create Comment from Cassandra row."""
        return cls(
            id=row.id,
            post_id=row.post_id,
            username=row.username,
            email=row.email,
            ip_address=row.ip_address,
            comment_content=row.comment_content,
            create_time_utc=_as_utc(row.create_time_utc),
            is_approved=bool(row.is_approved),
            moderation=row.moderation,
        )

    def to_row(self) -> dict[str, Any]:
        """Column values for the ``comments`` table."""
        return {
            "id": self.id,
            "post_id": self.post_id,
            "username": self.username,
            "email": self.email,
            "ip_address": self.ip_address,
            "comment_content": self.comment_content,
            "create_time_utc": self.create_time_utc,
            "is_approved": self.is_approved,
            "moderation": self.moderation,
        }


@dataclass
class CommentReply:
    """Administrator reply to a comment."""

    id: UUID
    comment_id: UUID
    reply_content: str
    create_time_utc: datetime

    @classmethod
    def from_row(cls, row: Any) -> "CommentReply":
        """Create CommentReply from Cassandra row."""
        return cls(
            id=row.id,
            comment_id=row.comment_id,
            reply_content=row.reply_content,
            create_time_utc=_as_utc(row.create_time_utc),
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "comment_id": self.comment_id,
            "reply_content": self.reply_content,
            "create_time_utc": self.create_time_utc,
        }


@dataclass
class Post:
    """The slice of a blog post this package reads."""

    id: UUID
    title: str
    slug: str
    is_deleted: bool = False

    @classmethod
    def from_row(cls, row: Any) -> "Post":
        return cls(
            id=row.id,
            title=row.title,
            slug=row.slug,
            is_deleted=bool(row.is_deleted),
        )

    def to_row(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "is_deleted": self.is_deleted,
        }


# ==============================================================================
# Factory Functions
# ==============================================================================


def create_comment(
    post_id: UUID,
    username: str,
    email: str,
    ip_address: str,
    comment_content: str,
    is_approved: bool,
    moderation: str | None = None,
) -> Comment:
    """Create a new comment stamped with the current UTC time."""
    return Comment(
        id=uuid4(),
        post_id=post_id,
        username=username,
        email=email,
        ip_address=ip_address,
        comment_content=comment_content,
        create_time_utc=datetime.now(UTC),
        is_approved=is_approved,
        moderation=moderation,
    )


def create_comment_reply(comment_id: UUID, reply_content: str) -> CommentReply:
    """Create a new reply to ``comment_id``."""
    return CommentReply(
        id=uuid4(),
        comment_id=comment_id,
        reply_content=reply_content,
        create_time_utc=datetime.now(UTC),
    )
