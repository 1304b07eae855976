"""Specifications over comments, replies and posts."""

from collections.abc import Iterable
from dataclasses import dataclass
from uuid import UUID

from inkwell.core.specification import KeyFilter, OrderBy, Page, Specification

from .models import Comment, CommentReply, Post


_NEWEST_FIRST = OrderBy(key=lambda item: item.create_time_utc, descending=True)
_OLDEST_FIRST = OrderBy(key=lambda item: item.create_time_utc)


@dataclass(frozen=True)
class CommentSpec(Specification[Comment]):
    """Comments filtered by post, approval state and/or ids.

    ``None`` filters are ignored, so ``CommentSpec()`` selects everything.
    """

    post_id: UUID | None = None
    is_approved: bool | None = None
    ids: frozenset[UUID] | None = None
    newest_first: bool = False
    page: Page | None = None

    @classmethod
    def approved_for_post(cls, post_id: UUID) -> "CommentSpec":
        """Approved comments of one post, newest first."""
        return cls(post_id=post_id, is_approved=True, newest_first=True)

    @classmethod
    def by_ids(cls, ids: Iterable[UUID]) -> "CommentSpec":
        return cls(ids=frozenset(ids))

    @classmethod
    def paged(cls, page_size: int, page_number: int) -> "CommentSpec":
        """One page of all comments, newest first.

        Raises:
            ValueError: If ``page_size`` or ``page_number`` is below 1
        """
        return cls(newest_first=True, page=Page(number=page_number, size=page_size))

    @property
    def order_by(self) -> OrderBy | None:
        return _NEWEST_FIRST if self.newest_first else None

    @property
    def paging(self) -> Page | None:
        return self.page

    @property
    def key_filter(self) -> KeyFilter | None:
        if self.ids is not None:
            return KeyFilter("id", self.ids)
        if self.post_id is not None:
            return KeyFilter("post_id", frozenset({self.post_id}))
        return None

    def is_satisfied_by(self, entity: Comment) -> bool:
        if self.ids is not None and entity.id not in self.ids:
            return False
        if self.post_id is not None and entity.post_id != self.post_id:
            return False
        return self.is_approved is None or entity.is_approved == self.is_approved


@dataclass(frozen=True)
class CommentReplySpec(Specification[CommentReply]):
    """Replies owned by any of ``comment_ids``, oldest first."""

    comment_ids: frozenset[UUID]

    @classmethod
    def for_comments(cls, comment_ids: Iterable[UUID]) -> "CommentReplySpec":
        return cls(comment_ids=frozenset(comment_ids))

    @property
    def order_by(self) -> OrderBy | None:
        return _OLDEST_FIRST

    @property
    def key_filter(self) -> KeyFilter | None:
        return KeyFilter("comment_id", self.comment_ids)

    def is_satisfied_by(self, entity: CommentReply) -> bool:
        return entity.comment_id in self.comment_ids


@dataclass(frozen=True)
class PostSpec(Specification[Post]):
    """Posts by id, deleted ones excluded unless asked for."""

    ids: frozenset[UUID]
    include_deleted: bool = False

    @classmethod
    def by_id(cls, post_id: UUID, include_deleted: bool = False) -> "PostSpec":
        return cls(ids=frozenset({post_id}), include_deleted=include_deleted)

    @property
    def key_filter(self) -> KeyFilter | None:
        return KeyFilter("id", self.ids)

    def is_satisfied_by(self, entity: Post) -> bool:
        if entity.id not in self.ids:
            return False
        return self.include_deleted or not entity.is_deleted
