"""Time-ordered ID generation for ledger entries and projects.

Ledger entry ids are ints (millisecond timestamp + per-ms sequence) so the
history can be ordered and paged by id. Project ids are the same number as str.
"""

import threading
import time


class TimeOrderedIdGenerator:
    """Monotonic ids: (ms_since_epoch << 12) | sequence.

    Up to 4096 ids per millisecond; a clock that steps backwards reuses the
    last seen millisecond so ids never decrease.
    """

    _SEQUENCE_BITS = 12
    _MAX_SEQUENCE = (1 << _SEQUENCE_BITS) - 1

    def __init__(self) -> None:
        self._last_ms = -1
        self._sequence = 0
        self._lock = threading.Lock()

    def next_int(self) -> int:
        with self._lock:
            now_ms = max(int(time.time() * 1000), self._last_ms)
            if now_ms == self._last_ms:
                self._sequence += 1
                if self._sequence > self._MAX_SEQUENCE:
                    now_ms += 1
                    self._sequence = 0
            else:
                self._sequence = 0
            self._last_ms = now_ms
            return (now_ms << self._SEQUENCE_BITS) | self._sequence


_default_generator = TimeOrderedIdGenerator()


def next_entry_id() -> int:
    """Id for a LedgerEntry."""
    return _default_generator.next_int()


def generate_project_id() -> str:
    """Id for a Project."""
    return str(_default_generator.next_int())
