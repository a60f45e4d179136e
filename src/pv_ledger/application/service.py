"""LedgerApplicationService: balance, history and withdrawal.

Withdrawal only computes the fee and debits the ledger; paying out to the
destination address happens outside this service.
"""

import logging
import re

from config.settings import settings
from src.pv_common.enums import LedgerEntryType, ValidationRule
from src.pv_common.errors import InputValidationError, InternalError
from src.pv_common.points import calc_withdraw_fee
from src.pv_ledger.application.schemas import (
    BalanceResponse,
    LedgerEntryItem,
    LedgerHistoryResponse,
    WithdrawResponse,
)
from src.pv_session.application.context import SessionContext

logger = logging.getLogger(__name__)

_ADDRESS_RE = re.compile(r"^[A-Za-z0-9]+$")


def validate_withdraw_address(address: str) -> None:
    if len(address) < settings.WITHDRAW_ADDRESS_MIN_LENGTH or not _ADDRESS_RE.match(address):
        raise InputValidationError(
            ValidationRule.WITHDRAW_ADDRESS_INVALID,
            f"address must be at least {settings.WITHDRAW_ADDRESS_MIN_LENGTH} "
            "alphanumeric characters",
        )


class LedgerApplicationService:
    def __init__(self, ctx: SessionContext) -> None:
        self._ctx = ctx

    async def get_balance(self, user_id: str) -> BalanceResponse:
        async with self._ctx.reading() as state:
            ledger = await self._ctx.ledger_for(state, user_id)
            return BalanceResponse(user_id=user_id, balance=ledger.balance)

    async def get_history(
        self, user_id: str, entry_type: LedgerEntryType | None = None
    ) -> LedgerHistoryResponse:
        async with self._ctx.reading() as state:
            ledger = await self._ctx.ledger_for(state, user_id)
            entries = ledger.history()
            balance = ledger.balance
        if entry_type is not None:
            entries = [e for e in entries if e.kind is entry_type]
        return LedgerHistoryResponse(
            user_id=user_id,
            balance=balance,
            items=[LedgerEntryItem.from_domain(e) for e in entries],
        )

    async def withdraw(self, user_id: str, address: str, amount: int) -> WithdrawResponse:
        address = address.strip()
        if amount <= 0:
            raise InputValidationError(
                ValidationRule.WITHDRAW_AMOUNT_NOT_POSITIVE, f"amount must be > 0, got {amount}"
            )
        validate_withdraw_address(address)
        fee = calc_withdraw_fee(amount, settings.WITHDRAW_FEE_PERCENT)
        total = amount + fee

        async with self._ctx.transaction() as state:
            ledger = await self._ctx.ledger_for(state, user_id)
            entry = ledger.debit(
                total, LedgerEntryType.WITHDRAW, f"Withdraw {amount} points (fee {fee})"
            )
            if entry is None:
                raise InternalError("withdrawal produced no ledger entry")
            state.supply.withdrawn += total

        logger.info(
            "Withdrawal: user=%s amount=%d fee=%d balance=%d", user_id, amount, fee, ledger.balance
        )
        return WithdrawResponse(
            amount=amount,
            fee=fee,
            total_deducted=total,
            balance=ledger.balance,
            ledger_entry_id=entry.id,
        )
