"""SettlementService: publish a project's result and pay out correct voters.

There is no deadline gate and no minimum-vote gate: the creator may publish
at any time. Publishing is one-way; the project is terminal afterwards.
Each beneficiary's own ledger is credited (looked up by voter id).
"""

import logging
from typing import Any

from config.settings import settings
from src.pv_common.enums import LedgerEntryType, ProjectStatus, ResidualPolicy, VoteOption
from src.pv_common.errors import AlreadyPublishedError, ForbiddenError
from src.pv_project.application.service import get_project_or_raise
from src.pv_session.application.context import SessionContext
from src.pv_session.domain.models import UserIdentity
from src.pv_settlement.application.schemas import PayoutItem, SettlementResponse
from src.pv_settlement.domain.invariants import (
    verify_points_conservation,
    verify_project_invariants,
)
from src.pv_settlement.domain.payout import compute_payouts

logger = logging.getLogger(__name__)


class SettlementService:
    def __init__(self, ctx: SessionContext, policy: ResidualPolicy | None = None) -> None:
        self._ctx = ctx
        self._policy = policy or ResidualPolicy(settings.SETTLEMENT_RESIDUAL_POLICY)

    async def publish_result(
        self, actor: UserIdentity, project_id: str, result: VoteOption
    ) -> SettlementResponse:
        async with self._ctx.transaction() as state:
            project = get_project_or_raise(state, project_id)
            if project.creator_id != actor.uid:
                raise ForbiddenError(actor.uid, project_id)
            if project.result_published:
                raise AlreadyPublishedError(project_id)

            plan = compute_payouts(project.vote_details, result, project.frozen_points, self._policy)
            title = project.title

            for payout in plan.payouts:
                ledger = await self._ctx.ledger_for(state, payout.voter)
                ledger.credit(
                    payout.stake, LedgerEntryType.VOTE_RETURN, f"Vote stake returned - {title}"
                )
                if payout.extra_reward > 0:
                    ledger.credit(
                        payout.extra_reward,
                        LedgerEntryType.VOTE_REWARD,
                        f"Vote reward - {title} (extra {payout.extra_reward} points)",
                    )

            creator_ledger = await self._ctx.ledger_for(state, project.creator_id)
            creator_ledger.annotate(
                -plan.total_extra_reward,
                LedgerEntryType.PROJECT_REWARD_PAYOUT,
                f"Project reward payout - {title} (escrow used for rewards)",
            )
            if plan.creator_refund > 0:
                reason = "no correct votes" if not plan.payouts else "rounding remainder"
                creator_ledger.credit(
                    plan.creator_refund,
                    LedgerEntryType.PROJECT_REFUND,
                    f"Project escrow refund - {title} ({reason})",
                )

            project.frozen_points = plan.retained_escrow
            project.forfeited_points = plan.forfeited_points
            project.result = result
            project.result_published = True
            project.status = ProjectStatus.SETTLED

        logger.info(
            "Result published: project=%s result=%s beneficiaries=%d rewards=%d retained=%d",
            project_id, result.value, len(plan.payouts), plan.total_rewards, plan.retained_escrow,
        )
        return SettlementResponse(
            project_id=project_id,
            result=result,
            payouts=[
                PayoutItem(
                    voter=p.voter,
                    stake=p.stake,
                    extra_reward=p.extra_reward,
                    total_reward=p.total_reward,
                )
                for p in plan.payouts
            ],
            total_voted_points=plan.total_voted_points,
            total_extra_reward=plan.total_extra_reward,
            total_rewards=plan.total_rewards,
            creator_refund=plan.creator_refund,
            retained_escrow=plan.retained_escrow,
            forfeited_points=plan.forfeited_points,
        )

    async def verify_all_invariants(self) -> dict[str, Any]:
        """Run per-project (INV-1/2/3) and global (INV-G) checks."""
        async with self._ctx.reading() as state:
            violations: list[str] = []
            for project in state.projects:
                violations.extend(verify_project_invariants(project))
            for uid in state.supply.accounts:
                await self._ctx.ledger_for(state, uid)
            violations.extend(verify_points_conservation(state))
        return {"ok": not violations, "violations": violations}
