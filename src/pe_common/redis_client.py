"""Redis client for the POST rate limiter.

Balances, escrow and counters live in PostgreSQL only. Losing Redis
disables rate limiting; it never blocks trading.
"""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from config.settings import settings

logger = logging.getLogger(__name__)

_client: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Return the shared client, creating it on first use."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=1,
        )
    return _client


async def ping_redis() -> bool:
    try:
        return bool(await (await get_redis()).ping())
    except (RedisError, OSError) as exc:
        logger.warning("Redis unreachable at startup, rate limiting will fail open: %s", exc)
        return False


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None
