# ruff: noqa: PLW0603
"""Redis client for the shared banned-term list.

Opened once at startup when ``CONTENT_WORD_SOURCE=redis``; the comment
service factory picks it up through ``get_redis``.
"""

import redis.asyncio as redis

from inkwell.config import Settings, get_settings
from inkwell.core.logging import get_logger


logger = get_logger(__name__)

_redis_client: redis.Redis | None = None


async def init_redis(settings: Settings | None = None) -> redis.Redis:
    """Open the client and check the server answers.

    Raises:
        redis.ConnectionError: If the server does not answer PING; no
            client is kept in that case
    """
    global _redis_client

    settings = settings or get_settings()
    client = redis.from_url(
        settings.redis_url,
        max_connections=settings.redis_max_connections,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_socket_connect_timeout,
        retry_on_timeout=settings.redis_retry_on_timeout,
        health_check_interval=settings.redis_health_check_interval,
        decode_responses=True,
    )

    try:
        await client.ping()
    except redis.ConnectionError as e:
        logger.warning("redis_connection_failed", error=str(e))
        await client.aclose()
        raise

    _redis_client = client
    logger.info("redis_connected", words_key=settings.moderation_words_key)
    return client


async def shutdown_redis() -> None:
    global _redis_client

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
        logger.info("redis_disconnected")


def get_redis() -> redis.Redis | None:
    """Client opened by ``init_redis``, or None before startup."""
    return _redis_client
