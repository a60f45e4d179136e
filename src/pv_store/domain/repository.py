"""Key-value store Protocol: whole-value reads and atomic multi-key replaces.

Values are JSON-compatible Python objects (dict / list / str / int / None).
Unit tests inject InMemoryKeyValueStore or a mock that conforms to this Protocol.
"""

from typing import Any, Protocol


class KeyValueStoreProtocol(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def put_many(self, values: dict[str, Any]) -> None:
        """Replace every key in `values` as one unit: all applied or none."""
        ...

    async def delete(self, key: str) -> None: ...
