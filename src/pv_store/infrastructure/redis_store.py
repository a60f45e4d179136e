"""Redis-backed key-value store.

put_many runs inside a MULTI/EXEC pipeline so a batch of whole-value replaces
is applied atomically. Any Redis failure surfaces as PersistenceError.
"""

import logging
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.pv_common.errors import PersistenceError
from src.pv_store.infrastructure.codec import decode_value, encode_values

logger = logging.getLogger(__name__)


class RedisKeyValueStore:
    def __init__(self, client: aioredis.Redis, key_prefix: str = "") -> None:
        self._client = client
        self._prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._client.get(self._key(key))
        except RedisError as e:
            raise PersistenceError(str(e)) from e
        if raw is None:
            return None
        return decode_value(raw)

    async def put_many(self, values: dict[str, Any]) -> None:
        if not values:
            return
        encoded = encode_values(values)
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                for key, raw in encoded.items():
                    pipe.set(self._key(key), raw)
                await pipe.execute()
        except RedisError as e:
            logger.error("Redis MULTI/EXEC failed for %d keys: %s", len(encoded), e)
            raise PersistenceError(str(e)) from e

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(self._key(key))
        except RedisError as e:
            raise PersistenceError(str(e)) from e
