"""Comment system module.

Provides the blog comment workflow with:
- Word-filter moderation (mask or block)
- Approval review (pending <-> approved)
- Administrator replies
- Cascading deletion of comments and their replies

Note: ``dependencies`` is not exported here; it pulls in the Cassandra
wiring. Import it directly from inkwell.comments.dependencies when needed.
"""

from .models import (
    COMMENTS_TABLES_CQL,
    Comment,
    CommentReply,
    Post,
)
from .schemas import (
    CommentDetailedItem,
    CommentReplyDetail,
    CommentReplyDigest,
    CommentRequest,
    PublicComment,
)
from .service import (
    CommentError,
    CommentNotFoundError,
    CommentService,
    EmptyCommentIdsError,
    InvalidArgumentError,
    PageOutOfRangeError,
    PostNotFoundError,
)
from .specifications import CommentReplySpec, CommentSpec, PostSpec


__all__ = [
    "COMMENTS_TABLES_CQL",
    "Comment",
    "CommentDetailedItem",
    "CommentError",
    "CommentNotFoundError",
    "CommentReply",
    "CommentReplyDetail",
    "CommentReplyDigest",
    "CommentReplySpec",
    "CommentRequest",
    "CommentService",
    "CommentSpec",
    "EmptyCommentIdsError",
    "InvalidArgumentError",
    "PageOutOfRangeError",
    "Post",
    "PostNotFoundError",
    "PostSpec",
    "PublicComment",
]
