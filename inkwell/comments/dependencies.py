"""Wiring for the comment system.

Builds a ``CommentService`` over Cassandra storage, the configured
banned-term source and the Cassandra audit trail.
"""

from typing import TYPE_CHECKING, Any

from inkwell.audit import CassandraBlogAudit
from inkwell.config import Settings, get_settings
from inkwell.core.redis import get_redis
from inkwell.core.repository import CassandraRepository
from inkwell.moderation import LocalCommentModerator, create_word_source

from .models import (
    COMMENT_COLUMNS,
    COMMENT_REPLY_COLUMNS,
    POST_COLUMNS,
    Comment,
    CommentReply,
    Post,
)
from .service import CommentService


if TYPE_CHECKING:
    from redis.asyncio import Redis


def get_comment_service(
    session: Any,
    redis: "Redis | None" = None,
    settings: Settings | None = None,
) -> CommentService:
    """Create a comment service bound to an open Cassandra session.

    Args:
        session: Cassandra session, keyspace already created
        redis: Redis client for ``CONTENT_WORD_SOURCE=redis``; defaults to the
            client opened by ``init_redis``
        settings: Settings to use; defaults to the cached application settings

    Returns:
        CommentService instance
    """
    settings = settings or get_settings()
    keyspace = settings.cassandra_keyspace
    if redis is None and settings.content_word_source == "redis":
        redis = get_redis()

    return CommentService(
        blog_config=settings,
        audit=CassandraBlogAudit(session, keyspace),
        comment_repo=CassandraRepository(
            session,
            keyspace,
            "comments",
            Comment,
            COMMENT_COLUMNS,
            indexed_columns=("post_id",),
        ),
        reply_repo=CassandraRepository(
            session,
            keyspace,
            "comment_replies",
            CommentReply,
            COMMENT_REPLY_COLUMNS,
            indexed_columns=("comment_id",),
        ),
        post_repo=CassandraRepository(session, keyspace, "posts", Post, POST_COLUMNS),
        moderator=LocalCommentModerator(create_word_source(settings, redis)),
    )
