"""Redis connection for the durable store back-end (STORE_BACKEND=redis).

One client per process, created and pinged on first use, closed by the app
lifespan. An unreachable server surfaces as PersistenceError at startup.
"""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from config.settings import settings
from src.pv_common.errors import PersistenceError

logger = logging.getLogger(__name__)

_client: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    global _client  # noqa: PLW0603
    if _client is None:
        client = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
        try:
            await client.ping()
        except RedisError as e:
            await client.aclose()
            raise PersistenceError(f"Redis unreachable: {e}") from e
        logger.info("Redis connected")
        _client = client
    return _client


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None
