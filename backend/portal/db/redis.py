"""Redis client holding admin sessions.

One client per process, created at startup. Tests hand in their own
client (fakeredis) through init_redis(client=...).
"""

import redis.asyncio as redis

from portal.core.config import get_settings

_redis: redis.Redis | None = None


async def init_redis(url: str | None = None, client: redis.Redis | None = None) -> None:
    """Create (or adopt) the shared Redis client and check it answers.

    Args:
        url: Connection URL; defaults to settings.redis_url
        client: Ready-made client to use instead of connecting to url
    """
    global _redis

    if _redis is not None:
        return

    if client is None:
        client = redis.from_url(url or get_settings().redis_url, encoding="utf-8", decode_responses=True)

    await client.ping()
    _redis = client


async def close_redis() -> None:
    global _redis

    if _redis is not None:
        await _redis.aclose()
        _redis = None


def get_redis() -> redis.Redis:
    """Return the shared Redis client.

    Raises RuntimeError if init_redis() has not been called.
    """
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


async def ping_redis() -> bool:
    """True when the shared client is initialized and answers PING."""
    return _redis is not None and bool(await _redis.ping())
