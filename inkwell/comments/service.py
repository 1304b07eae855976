"""Comment system service layer.

Business logic for:
- Comment submission through word-filter moderation
- Approval workflow (pending <-> approved)
- Administrator replies
- Cascading deletion (replies first, then their comment)
- Public and paginated admin listings
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any
from uuid import UUID

from inkwell.audit import AuditEventId, BlogAudit
from inkwell.config.settings import ContentSettings, WordFilterMode
from inkwell.core.logging import get_logger
from inkwell.moderation import CommentModerator

from .models import Comment, CommentReply, Post, create_comment, create_comment_reply
from .schemas import (
    CommentDetailedItem,
    CommentReplyDetail,
    CommentReplyDigest,
    CommentRequest,
    PublicComment,
)
from .specifications import CommentReplySpec, CommentSpec, PostSpec


if TYPE_CHECKING:
    from inkwell.core.repository import Repository


logger = get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class CommentError(Exception):
    """Base comment error."""

    def __init__(self, message: str, code: str = "comment_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidArgumentError(CommentError, ValueError):
    """Malformed request rejected before any storage access."""

    def __init__(self, message: str = "Invalid argument"):
        super().__init__(message, "invalid_argument")


class EmptyCommentIdsError(InvalidArgumentError):
    """No comment ids were given to a batch operation."""

    def __init__(self, message: str = "At least one comment id is required"):
        super().__init__(message)


class PageOutOfRangeError(CommentError, ValueError):
    """Page size or page number below 1."""

    def __init__(self, name: str, value: int):
        self.name = name
        self.value = value
        super().__init__(f"{name} must be at least 1, got {value}", "out_of_range")


class CommentNotFoundError(CommentError, LookupError):
    """Comment not found."""

    def __init__(self, message: str = "Comment not found"):
        super().__init__(message, "comment_not_found")


class PostNotFoundError(CommentError, LookupError):
    """Post not found."""

    def __init__(self, message: str = "Post not found"):
        super().__init__(message, "post_not_found")


# ==============================================================================
# Comment Service
# ==============================================================================


class CommentService:
    """Service for comment moderation and administration.

    Holds no per-request state, so one instance can serve concurrent calls.
    """

    def __init__(
        self,
        blog_config: Any,
        audit: BlogAudit,
        comment_repo: "Repository[Comment]",
        reply_repo: "Repository[CommentReply]",
        post_repo: "Repository[Post]",
        moderator: CommentModerator,
    ):
        """Initialize with collaborators.

        Args:
            blog_config: Anything exposing ``content_settings``, read per call
            audit: Audit sink for administrative actions
            comment_repo: Comment storage
            reply_repo: Comment reply storage
            post_repo: Post lookup
            moderator: Word-filter moderator
        """
        self.blog_config = blog_config
        self.audit = audit
        self.comment_repo = comment_repo
        self.reply_repo = reply_repo
        self.post_repo = post_repo
        self.moderator = moderator

    @property
    def content_settings(self) -> ContentSettings:
        return self.blog_config.content_settings

    # ==========================================================================
    # Queries
    # ==========================================================================

    async def count(self) -> int:
        """Total number of comments, approved or not."""
        return await self.comment_repo.count()

    async def get_approved_comments(self, post_id: UUID) -> list[PublicComment]:
        """Approved comments of a post, newest first, with their replies."""
        comments = await self.comment_repo.get(CommentSpec.approved_for_post(post_id))
        replies = await self._get_reply_digests([c.id for c in comments])

        result = []
        for comment in comments:
            item = PublicComment.from_comment(comment)
            item.comment_replies = replies.get(comment.id, [])
            result.append(item)
        return result

    async def get_comments(
        self, page_size: int, page_number: int
    ) -> list[CommentDetailedItem]:
        """One page of all comments for the moderation screen, newest first.

        Raises:
            PageOutOfRangeError: If ``page_size`` or ``page_number`` is below 1
        """
        if page_size < 1:
            raise PageOutOfRangeError("page_size", page_size)
        if page_number < 1:
            raise PageOutOfRangeError("page_number", page_number)

        comments = await self.comment_repo.get(
            CommentSpec.paged(page_size=page_size, page_number=page_number)
        )
        if not comments:
            return []

        post_spec = PostSpec(
            ids=frozenset(c.post_id for c in comments), include_deleted=True
        )
        titles = dict(
            await self.post_repo.select(post_spec, lambda post: (post.id, post.title))
        )
        replies = await self._get_reply_digests([c.id for c in comments])

        result = []
        for comment in comments:
            item = CommentDetailedItem.from_comment(
                comment, post_title=titles.get(comment.post_id)
            )
            item.comment_replies = replies.get(comment.id, [])
            result.append(item)
        return result

    async def _get_reply_digests(
        self, comment_ids: list[UUID]
    ) -> dict[UUID, list[CommentReplyDigest]]:
        """Replies grouped by owning comment, oldest first."""
        if not comment_ids:
            return {}

        replies = await self.reply_repo.get(CommentReplySpec.for_comments(comment_ids))
        grouped: dict[UUID, list[CommentReplyDigest]] = {}
        for reply in replies:
            grouped.setdefault(reply.comment_id, []).append(
                CommentReplyDigest.from_reply(reply)
            )
        return grouped

    # ==========================================================================
    # Submission
    # ==========================================================================

    async def create(self, request: CommentRequest) -> CommentDetailedItem | None:
        """Submit a comment.

        Performs:
        - Post title lookup (the post must exist)
        - Word filtering: block the comment or mask banned terms
        - Persistence, pending review or approved right away
        - Audit entry (best effort)

        Returns:
            The created comment, or None when the word filter blocked it

        Raises:
            PostNotFoundError: If the post does not exist
            ModerationUnavailableError: If the banned-term list is unavailable
        """
        post_title = await self.post_repo.select_first_or_default(
            PostSpec.by_id(request.post_id), lambda post: post.title
        )
        if post_title is None:
            raise PostNotFoundError(f"Post {request.post_id} not found")

        settings = self.content_settings
        username = request.username
        content = request.content
        moderation = None

        if settings.enable_word_filter:
            if settings.word_filter_mode is WordFilterMode.BLOCK:
                if await self.moderator.has_bad_word(username, content):
                    logger.info("comment_blocked", post_id=str(request.post_id))
                    return None
            else:
                username = await self.moderator.moderate_content(username)
                content = await self.moderator.moderate_content(content)
                if (username, content) != (request.username, request.content):
                    moderation = "masked"

        comment = create_comment(
            post_id=request.post_id,
            username=username,
            email=str(request.email),
            ip_address=request.ip_address,
            comment_content=content,
            is_approved=not settings.require_comment_review,
            moderation=moderation,
        )
        await self.comment_repo.add(comment)

        logger.info(
            "comment_created",
            comment_id=str(comment.id),
            post_id=str(comment.post_id),
            is_approved=comment.is_approved,
            moderation=moderation,
        )
        await self._audit(
            AuditEventId.COMMENT_CREATED,
            f"Comment '{comment.id}' created on post '{comment.post_id}'",
        )

        return CommentDetailedItem.from_comment(comment, post_title=post_title)

    # ==========================================================================
    # Administration
    # ==========================================================================

    async def toggle_approval(self, comment_ids: Iterable[UUID] | None) -> None:
        """Flip the approval flag of each comment.

        Raises:
            EmptyCommentIdsError: If no ids are given
        """
        ids = self._require_ids(comment_ids)

        comments = await self.comment_repo.get(CommentSpec.by_ids(ids))
        for comment in comments:
            comment.is_approved = not comment.is_approved
            await self.comment_repo.update(comment)

            event_id = (
                AuditEventId.COMMENT_APPROVED
                if comment.is_approved
                else AuditEventId.COMMENT_DISAPPROVED
            )
            await self._audit(
                event_id,
                f"Updated comment approval status to '{comment.is_approved}' "
                f"for comment id: '{comment.id}'",
            )

        logger.info(
            "comment_approval_toggled", requested=len(ids), updated=len(comments)
        )

    async def delete(self, comment_ids: Iterable[UUID] | None) -> None:
        """Delete comments together with all of their replies.

        Each comment's replies are deleted before the comment itself, so an
        interrupted batch never leaves orphaned replies.

        Raises:
            EmptyCommentIdsError: If no ids are given
        """
        ids = self._require_ids(comment_ids)

        comments = await self.comment_repo.get(CommentSpec.by_ids(ids))
        deleted_replies = 0
        for comment in comments:
            replies = await self.reply_repo.get(
                CommentReplySpec.for_comments([comment.id])
            )
            if replies:
                await self.reply_repo.delete_many(replies)
                deleted_replies += len(replies)

            await self.comment_repo.delete(comment)
            await self._audit(
                AuditEventId.COMMENT_DELETED, f"Comment '{comment.id}' deleted."
            )

        logger.info(
            "comments_deleted",
            requested=len(ids),
            deleted=len(comments),
            deleted_replies=deleted_replies,
        )

    async def add_reply(self, comment_id: UUID, content: str) -> CommentReplyDetail:
        """Reply to a comment.

        Raises:
            InvalidArgumentError: If ``content`` is blank
            CommentNotFoundError: If the comment does not exist
        """
        content = content.strip() if content else ""
        if not content:
            raise InvalidArgumentError("Reply content cannot be empty")

        comment = await self.comment_repo.get_by_id(comment_id)
        if comment is None:
            raise CommentNotFoundError(f"Comment {comment_id} is not found.")

        reply = create_comment_reply(comment_id=comment_id, reply_content=content)
        await self.reply_repo.add(reply)

        post = await self.post_repo.select_first_or_default(
            PostSpec.by_id(comment.post_id, include_deleted=True), lambda post: post
        )

        logger.info(
            "comment_replied", comment_id=str(comment_id), reply_id=str(reply.id)
        )
        await self._audit(
            AuditEventId.COMMENT_REPLIED, f"Replied comment id '{comment_id}'"
        )

        return CommentReplyDetail.from_reply(reply, comment, post)

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @staticmethod
    def _require_ids(comment_ids: Iterable[UUID] | None) -> frozenset[UUID]:
        ids = frozenset(comment_ids or ())
        if not ids:
            raise EmptyCommentIdsError
        return ids

    async def _audit(self, event_id: AuditEventId, message: str) -> None:
        """Write an audit entry; failures are logged, never raised."""
        try:
            await self.audit.log(event_id, message)
        except Exception as e:
            logger.warning(
                "audit_write_failed", audit_event=event_id.value, error=str(e)
            )
