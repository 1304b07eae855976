"""Sources for the current banned-term list."""

from typing import TYPE_CHECKING, Protocol

from inkwell.moderation.word_filter import parse_words


if TYPE_CHECKING:
    from redis.asyncio import Redis

    from inkwell.config.settings import Settings


class WordSourceError(Exception):
    """The banned-term list could not be read."""


class WordSource(Protocol):
    async def get_words(self) -> list[str]: ...


class StringWordSource:
    """Terms from a ``|``-separated configuration string."""

    def __init__(self, words: str) -> None:
        self._words = parse_words(words)

    async def get_words(self) -> list[str]:
        return list(self._words)


class RedisWordSource:
    """Terms kept in a Redis set, shared by every application instance.

    Editors add terms with ``SADD <key> term`` and they apply on the next
    submission; nothing is cached here.
    """

    def __init__(self, redis: "Redis | None", key: str) -> None:
        self.redis = redis
        self.key = key

    async def get_words(self) -> list[str]:
        if self.redis is None:
            msg = "Redis client is not initialized"
            raise WordSourceError(msg)
        members = await self.redis.smembers(self.key)
        words = (
            member.decode() if isinstance(member, bytes) else member
            for member in members
        )
        return sorted(word for word in words if word.strip())


def create_word_source(
    settings: "Settings", redis: "Redis | None" = None
) -> WordSource:
    """Build the word source selected by ``CONTENT_WORD_SOURCE``."""
    if settings.content_word_source == "redis":
        return RedisWordSource(redis, settings.moderation_words_key)
    return StringWordSource(settings.content_disharmony_words)
