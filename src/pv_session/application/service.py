"""SessionService: sign-in / sign-out against the auth collaborator.

A user signing in for the first time gets a ledger opened with the signup
bonus (INITIAL_POINTS, kind `initial`).
"""

import logging
from dataclasses import dataclass

from config.settings import settings
from src.pv_common.enums import LedgerEntryType
from src.pv_gateway.auth.provider import AuthProviderProtocol
from src.pv_session.application.context import SessionContext
from src.pv_session.domain.models import UserIdentity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignInResult:
    user: UserIdentity
    balance: int
    is_new_user: bool


class SessionService:
    def __init__(self, ctx: SessionContext, provider: AuthProviderProtocol) -> None:
        self._ctx = ctx
        self._provider = provider

    async def sign_in(self, credentials: dict[str, str]) -> SignInResult:
        user = await self._provider.authenticate(credentials)
        async with self._ctx.transaction() as state:
            is_new = not await self._ctx.has_ledger(state, user.uid)
            ledger = await self._ctx.ledger_for(state, user.uid)
            if is_new:
                ledger.credit(settings.INITIAL_POINTS, LedgerEntryType.INITIAL, "New user signup bonus")
                state.supply.granted += settings.INITIAL_POINTS
                state.supply.accounts.append(user.uid)
            state.current_user = user
        logger.info("Signed in: uid=%s new=%s balance=%d", user.uid, is_new, ledger.balance)
        return SignInResult(user=user, balance=ledger.balance, is_new_user=is_new)

    async def sign_out(self, user: UserIdentity) -> None:
        await self._provider.sign_out(user.uid)
        await self._ctx.clear_current_user()
        logger.info("Signed out: uid=%s", user.uid)
