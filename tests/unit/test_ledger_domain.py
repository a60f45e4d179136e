"""Unit tests for the Ledger domain model."""

import pytest

from src.pv_common.enums import LedgerEntryType
from src.pv_common.errors import InsufficientFundsError, InvalidAmountError
from src.pv_ledger.domain.models import Ledger


def _make_ledger(balance: int = 1000, limit: int = 100) -> Ledger:
    return Ledger(user_id="alice", balance=balance, history_limit=limit)


class TestCredit:
    def test_increases_balance_and_logs(self) -> None:
        ledger = _make_ledger(100)
        entry = ledger.credit(50, LedgerEntryType.VOTE_RETURN, "stake back")
        assert ledger.balance == 150
        assert entry is not None
        assert entry.delta == 50
        assert entry.balance_after == 150
        assert ledger.history()[0] == entry

    def test_zero_is_noop(self) -> None:
        ledger = _make_ledger(100)
        assert ledger.credit(0, LedgerEntryType.VOTE_REWARD, "nothing") is None
        assert ledger.balance == 100
        assert ledger.history() == []

    def test_negative_rejected(self) -> None:
        ledger = _make_ledger(100)
        with pytest.raises(InvalidAmountError):
            ledger.credit(-1, LedgerEntryType.VOTE_REWARD, "bad")
        assert ledger.balance == 100


class TestDebit:
    def test_decreases_balance(self) -> None:
        ledger = _make_ledger(100)
        entry = ledger.debit(40, LedgerEntryType.VOTE_COST, "vote")
        assert ledger.balance == 60
        assert entry is not None
        assert entry.delta == -40
        assert entry.balance_after == 60

    def test_exact_balance_allowed(self) -> None:
        ledger = _make_ledger(100)
        ledger.debit(100, LedgerEntryType.PROJECT_COST, "all in")
        assert ledger.balance == 0

    def test_insufficient_funds_leaves_ledger_untouched(self) -> None:
        ledger = _make_ledger(100)
        with pytest.raises(InsufficientFundsError) as exc_info:
            ledger.debit(101, LedgerEntryType.VOTE_COST, "too much")
        assert exc_info.value.required == 101
        assert exc_info.value.available == 100
        assert ledger.balance == 100
        assert ledger.history() == []

    def test_zero_is_noop(self) -> None:
        ledger = _make_ledger(0)
        assert ledger.debit(0, LedgerEntryType.VOTE_COST, "nothing") is None
        assert ledger.history() == []


class TestAnnotate:
    def test_does_not_move_balance(self) -> None:
        ledger = _make_ledger(500)
        entry = ledger.annotate(-300, LedgerEntryType.PROJECT_REWARD_PAYOUT, "payout")
        assert ledger.balance == 500
        assert entry.delta == -300
        assert entry.balance_after == 500


class TestHistory:
    def test_capped_at_limit_keeps_most_recent(self) -> None:
        ledger = _make_ledger(0)
        for i in range(1, 106):
            ledger.credit(1, LedgerEntryType.VOTE_REWARD, f"entry {i}")

        history = ledger.history()
        assert len(history) == 100
        # newest first: entries 105 down to 6
        assert history[0].description == "entry 105"
        assert history[-1].description == "entry 6"
        assert [e.balance_after for e in history] == list(range(105, 5, -1))

    def test_history_is_a_copy(self) -> None:
        ledger = _make_ledger(10)
        ledger.credit(1, LedgerEntryType.VOTE_REWARD, "x")
        ledger.history().clear()
        assert len(ledger.history()) == 1

    def test_conservation_over_mixed_sequence(self) -> None:
        ledger = _make_ledger(1000)
        credits = [30, 0, 250]
        debits = [100, 75, 0, 5]
        for amount in credits:
            ledger.credit(amount, LedgerEntryType.VOTE_RETURN, "in")
        for amount in debits:
            ledger.debit(amount, LedgerEntryType.VOTE_COST, "out")
        assert ledger.balance == 1000 + sum(credits) - sum(debits)
        assert ledger.history()[0].balance_after == ledger.balance

    def test_is_empty(self) -> None:
        assert Ledger(user_id="nobody").is_empty
        assert not _make_ledger(1).is_empty
