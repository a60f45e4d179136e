"""JSON codec shared by the store back-ends."""

import json
import logging
from typing import Any

from src.pv_common.errors import PersistenceError

logger = logging.getLogger(__name__)


def encode_values(values: dict[str, Any]) -> dict[str, str]:
    """Encode every value up front; raises PersistenceError before any write."""
    try:
        return {key: json.dumps(value, separators=(",", ":")) for key, value in values.items()}
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"unserialisable value: {e}") from e


def decode_value(raw: str) -> Any:
    """Decode a stored JSON value.

    Scalars written by hand or by older clients may not be JSON; those come
    back as the raw string and the reader decides how to coerce them.
    """
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Stored value is not JSON, returning raw string: %.40r", raw)
        return raw
