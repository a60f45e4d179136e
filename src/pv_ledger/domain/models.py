"""Domain models for pv_ledger: pure dataclasses, no storage dependency."""

from dataclasses import dataclass, field
from datetime import datetime

from src.pv_common.datetime_utils import utc_now
from src.pv_common.enums import LedgerEntryType
from src.pv_common.errors import InsufficientFundsError, InvalidAmountError
from src.pv_common.id_generator import next_entry_id

DEFAULT_HISTORY_LIMIT = 100


@dataclass(frozen=True)
class LedgerEntry:
    id: int
    kind: LedgerEntryType
    delta: int               # positive=income negative=expense
    description: str
    timestamp: datetime
    balance_after: int       # balance snapshot after the entry was appended


@dataclass
class Ledger:
    """One user's spendable points and their capped, newest-first history."""

    user_id: str
    balance: int = 0
    entries: list[LedgerEntry] = field(default_factory=list)
    history_limit: int = DEFAULT_HISTORY_LIMIT

    def credit(self, amount: int, kind: LedgerEntryType, description: str) -> LedgerEntry | None:
        """Add points. A zero amount changes nothing and is not logged."""
        _check_amount(amount)
        if amount == 0:
            return None
        self.balance += amount
        return self._append(kind, amount, description)

    def debit(self, amount: int, kind: LedgerEntryType, description: str) -> LedgerEntry | None:
        """Remove points; raises InsufficientFundsError if amount > balance."""
        _check_amount(amount)
        if amount > self.balance:
            raise InsufficientFundsError(amount, self.balance)
        if amount == 0:
            return None
        self.balance -= amount
        return self._append(kind, -amount, description)

    def annotate(self, delta: int, kind: LedgerEntryType, description: str) -> LedgerEntry:
        """Log a bookkeeping entry that does not move the balance."""
        return self._append(kind, delta, description)

    @property
    def is_empty(self) -> bool:
        return self.balance == 0 and not self.entries

    def history(self) -> list[LedgerEntry]:
        return list(self.entries)

    def _append(self, kind: LedgerEntryType, delta: int, description: str) -> LedgerEntry:
        entry = LedgerEntry(
            id=next_entry_id(),
            kind=kind,
            delta=delta,
            description=description,
            timestamp=utc_now(),
            balance_after=self.balance,
        )
        self.entries.insert(0, entry)
        del self.entries[self.history_limit:]
        return entry


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidAmountError(amount)
