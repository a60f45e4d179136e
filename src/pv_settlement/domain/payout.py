"""Proportional payout computation: pure, no ledger or store access.

For result R and escrow F:
  correct         = vote records with option == R
  total_voted     = sum of correct stakes
  extra(v)        = floor(v.points * F / total_voted)
  total_reward(v) = v.points + extra(v)

Floor rounding leaves a residual F - sum(extra). ResidualPolicy decides where
it goes: RETAIN keeps it in escrow (released by deleting the project),
CREATOR refunds it at once, LARGEST_STAKE adds it to the largest correct stake
(earliest record wins ties). With no correct votes the whole escrow is refunded
to the creator.
"""

from dataclasses import dataclass

from src.pv_common.enums import ResidualPolicy, VoteOption
from src.pv_common.points import proportional_share
from src.pv_project.domain.models import VoteRecord


@dataclass(frozen=True)
class BeneficiaryPayout:
    voter: str
    stake: int
    extra_reward: int

    @property
    def total_reward(self) -> int:
        return self.stake + self.extra_reward


@dataclass(frozen=True)
class SettlementPlan:
    result: VoteOption
    payouts: list[BeneficiaryPayout]
    total_voted_points: int
    total_extra_reward: int
    creator_refund: int    # credited to the creator now
    retained_escrow: int   # left in project.frozen_points
    forfeited_points: int  # losing stakes

    @property
    def total_rewards(self) -> int:
        return sum(p.total_reward for p in self.payouts)


def compute_payouts(
    vote_details: list[VoteRecord],
    result: VoteOption,
    frozen_points: int,
    policy: ResidualPolicy = ResidualPolicy.RETAIN,
) -> SettlementPlan:
    correct = [v for v in vote_details if v.option is result]
    forfeited = sum(v.points for v in vote_details if v.option is not result)
    total_voted = sum(v.points for v in correct)

    if not correct:
        return SettlementPlan(
            result=result,
            payouts=[],
            total_voted_points=0,
            total_extra_reward=0,
            creator_refund=frozen_points,
            retained_escrow=0,
            forfeited_points=forfeited,
        )

    extras = [proportional_share(v.points, total_voted, frozen_points) for v in correct]
    residual = frozen_points - sum(extras)
    creator_refund = 0
    if residual > 0 and policy is ResidualPolicy.CREATOR:
        creator_refund, residual = residual, 0
    elif residual > 0 and policy is ResidualPolicy.LARGEST_STAKE:
        largest = max(range(len(correct)), key=lambda i: (correct[i].points, -i))
        extras[largest] += residual
        residual = 0

    payouts = [
        BeneficiaryPayout(voter=v.voter, stake=v.points, extra_reward=extra)
        for v, extra in zip(correct, extras)
    ]
    return SettlementPlan(
        result=result,
        payouts=payouts,
        total_voted_points=total_voted,
        total_extra_reward=sum(extras),
        creator_refund=creator_refund,
        retained_escrow=residual,
        forfeited_points=forfeited,
    )
