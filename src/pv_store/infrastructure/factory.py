"""Pick the store back-end from settings."""

from config.settings import settings
from src.pv_common.redis_client import get_redis
from src.pv_store.domain.repository import KeyValueStoreProtocol
from src.pv_store.infrastructure.memory_store import InMemoryKeyValueStore
from src.pv_store.infrastructure.redis_store import RedisKeyValueStore


async def build_store() -> KeyValueStoreProtocol:
    if settings.STORE_BACKEND == "redis":
        return RedisKeyValueStore(await get_redis(), settings.STORE_KEY_PREFIX)
    if settings.STORE_BACKEND == "memory":
        return InMemoryKeyValueStore()
    raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND!r}")
