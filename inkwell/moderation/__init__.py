"""Comment moderation.

- ``word_filter``: pure banned-term matching (detect and mask)
- ``sources``: where the banned-term list comes from (config or Redis)
- ``moderator``: async capability used by the comment service
"""

from .moderator import (
    CommentModerator,
    LocalCommentModerator,
    ModerationError,
    ModerationUnavailableError,
)
from .sources import (
    RedisWordSource,
    StringWordSource,
    WordSource,
    WordSourceError,
    create_word_source,
)
from .word_filter import WordFilter, parse_words


__all__ = [
    "CommentModerator",
    "LocalCommentModerator",
    "ModerationError",
    "ModerationUnavailableError",
    "RedisWordSource",
    "StringWordSource",
    "WordFilter",
    "WordSource",
    "WordSourceError",
    "create_word_source",
    "parse_words",
]
