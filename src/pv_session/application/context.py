"""SessionContext: the single mutual-exclusion boundary around all state.

Every mutating operation runs inside `transaction()`:
  1. acquire the global asyncio.Lock
  2. snapshot the in-memory SessionState
  3. run the mutation
  4. persist every collection in one atomic store write
On any exception in 3 or 4, task cancellation included, the snapshot is
restored and the error re-raised, so a failed validation, a failed write or
an abandoned request leaves no partial state behind.
"""

import asyncio
import copy
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from src.pv_ledger.domain.models import Ledger
from src.pv_session.domain.models import SessionState
from src.pv_session.infrastructure.persistence import SessionRepository
from src.pv_store.domain.repository import KeyValueStoreProtocol

logger = logging.getLogger(__name__)


class SessionContext:
    def __init__(
        self,
        store: KeyValueStoreProtocol,
        history_limit: int = 100,
        repo: SessionRepository | None = None,
    ) -> None:
        self._repo = repo or SessionRepository(store, history_limit)
        self._history_limit = history_limit
        self._lock = asyncio.Lock()
        self._state: SessionState | None = None

    @classmethod
    async def open(cls, store: KeyValueStoreProtocol, history_limit: int = 100) -> "SessionContext":
        ctx = cls(store, history_limit)
        await ctx.load()
        return ctx

    async def load(self) -> None:
        async with self._lock:
            self._state = await self._repo.load_state()

    @property
    def state(self) -> SessionState:
        if self._state is None:
            raise RuntimeError("SessionContext.load() has not been called")
        return self._state

    @asynccontextmanager
    async def reading(self) -> AsyncIterator[SessionState]:
        """Consistent read: never observes a mutation that might still roll back."""
        async with self._lock:
            yield self.state

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SessionState]:
        async with self._lock:
            snapshot = copy.deepcopy(self.state)
            try:
                yield self.state
                await self._repo.save(self.state)
            except BaseException:
                self._state = snapshot
                raise

    async def ledger_for(self, state: SessionState, user_id: str) -> Ledger:
        """Return the user's ledger, loading it from the store on first use.

        Must be called while holding the lock (inside reading()/transaction()).
        A user without a stored ledger gets an empty one.
        """
        ledger = state.ledgers.get(user_id)
        if ledger is None:
            ledger = await self._repo.load_ledger(user_id)
            if ledger is None:
                ledger = Ledger(user_id=user_id, history_limit=self._history_limit)
            state.ledgers[user_id] = ledger
        return ledger

    async def has_ledger(self, state: SessionState, user_id: str) -> bool:
        """True once the user has a balance or any history; an empty ledger counts as none."""
        ledger = state.ledgers.get(user_id)
        if ledger is None:
            ledger = await self._repo.load_ledger(user_id)
            if ledger is None:
                return False
            state.ledgers[user_id] = ledger
        return not ledger.is_empty

    async def clear_current_user(self) -> None:
        async with self._lock:
            await self._repo.clear_current_user()
            self.state.current_user = None
