"""In-process key-value store.

Values are kept JSON-encoded so reads return fresh copies and unserialisable
values fail before anything is written.
"""

from typing import Any

from src.pv_store.infrastructure.codec import decode_value, encode_values


class InMemoryKeyValueStore:
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return decode_value(raw)

    async def put_many(self, values: dict[str, Any]) -> None:
        encoded = encode_values(values)
        self._data.update(encoded)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)
