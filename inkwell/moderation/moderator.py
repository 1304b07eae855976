"""Comment moderator: the word filter behind an async capability.

The banned-term list is read from its source on every call. If the source
cannot be read the moderator fails closed with
``ModerationUnavailableError``; content is never let through unchecked.
"""

from typing import Protocol

from redis.exceptions import RedisError

from inkwell.core.logging import get_logger
from inkwell.moderation.sources import WordSource, WordSourceError
from inkwell.moderation.word_filter import WordFilter


logger = get_logger(__name__)

# Failures of the term source that are treated as transient.
SOURCE_ERRORS = (WordSourceError, RedisError, OSError)


class ModerationError(Exception):
    """Base moderation error."""

    def __init__(self, message: str, code: str = "moderation_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class ModerationUnavailableError(ModerationError):
    """Banned-term source unavailable; the submission was not checked."""

    def __init__(
        self, message: str = "Comment moderation is temporarily unavailable"
    ):
        super().__init__(message, "moderation_unavailable")


class CommentModerator(Protocol):
    async def moderate_content(self, text: str) -> str: ...

    async def has_bad_word(self, *contents: str) -> bool: ...


class LocalCommentModerator:
    """Moderator running the in-process word filter."""

    def __init__(self, source: WordSource) -> None:
        self.source = source

    async def _load_filter(self) -> WordFilter:
        try:
            words = await self.source.get_words()
        except SOURCE_ERRORS as e:
            logger.error(
                "moderation_source_unavailable",
                source=type(self.source).__name__,
                error=str(e),
            )
            raise ModerationUnavailableError from e
        return WordFilter(words)

    async def moderate_content(self, text: str) -> str:
        """Mask banned terms in ``text``."""
        word_filter = await self._load_filter()
        return word_filter.filter_content(text)

    async def has_bad_word(self, *contents: str) -> bool:
        """Check whether any of ``contents`` contains a banned term."""
        word_filter = await self._load_filter()
        return any(word_filter.contains_any_word(content) for content in contents)
