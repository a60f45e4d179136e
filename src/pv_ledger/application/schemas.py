"""Pydantic schemas for pv_ledger API."""

from pydantic import BaseModel, Field

from src.pv_ledger.domain.models import LedgerEntry

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class WithdrawRequest(BaseModel):
    address: str = Field(..., description="Destination wallet address")
    amount: int = Field(..., gt=0, description="Points to withdraw, fee charged on top")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: str
    balance: int


class LedgerEntryItem(BaseModel):
    id: int
    kind: str
    delta: int
    description: str
    balance_after: int
    timestamp: str  # ISO8601 string

    @classmethod
    def from_domain(cls, entry: LedgerEntry) -> "LedgerEntryItem":
        return cls(
            id=entry.id,
            kind=entry.kind.value,
            delta=entry.delta,
            description=entry.description,
            balance_after=entry.balance_after,
            timestamp=entry.timestamp.isoformat(),
        )


class LedgerHistoryResponse(BaseModel):
    user_id: str
    balance: int
    items: list[LedgerEntryItem]


class WithdrawResponse(BaseModel):
    amount: int
    fee: int
    total_deducted: int
    balance: int
    ledger_entry_id: int
