"""VotingService: stake points on one option of a project.

A user may vote any number of times, on either option; each call is an
independent stake. The debit, the vote record, the pool increment and the
vote-log entry are applied and persisted as one unit.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from src.pv_common.datetime_utils import utc_now
from src.pv_common.enums import LedgerEntryType, VoteOption
from src.pv_project.application.service import get_project_or_raise
from src.pv_project.domain.models import UserVote, VoteRecord
from src.pv_session.application.context import SessionContext
from src.pv_session.domain.models import UserIdentity
from src.pv_voting.application.schemas import CastVoteResponse
from src.pv_voting.domain.rules import (
    check_balance,
    check_pool,
    check_vote_points,
    check_voting_open,
)

logger = logging.getLogger(__name__)


class VotingService:
    def __init__(self, ctx: SessionContext, clock: Callable[[], datetime] = utc_now) -> None:
        self._ctx = ctx
        self._clock = clock

    async def cast_vote(
        self,
        voter: UserIdentity,
        project_id: str,
        option: VoteOption,
        points: int,
    ) -> CastVoteResponse:
        check_vote_points(points)
        now = self._clock()

        async with self._ctx.transaction() as state:
            project = get_project_or_raise(state, project_id)
            check_voting_open(project, now)
            ledger = await self._ctx.ledger_for(state, voter.uid)
            check_balance(ledger, points)
            check_pool(project, option, points)

            label = "yes" if option is VoteOption.YES else "no"
            ledger.debit(
                points,
                LedgerEntryType.VOTE_COST,
                f"Vote - {project.title} ({label}, {points} points)",
            )
            project.vote_details.append(
                VoteRecord(voter=voter.uid, option=option, points=points, timestamp=now)
            )
            project.votes.add(option, points)
            project.voters.append(voter.uid)
            state.user_votes.append(
                UserVote(
                    project_id=project_id,
                    user_id=voter.uid,
                    option=option,
                    points=points,
                    timestamp=now,
                )
            )

        logger.info(
            "Vote cast: project=%s voter=%s option=%s points=%d",
            project_id, voter.uid, option.value, points,
        )
        return CastVoteResponse(
            project_id=project_id,
            option=option,
            points=points,
            remaining=project.remaining_points(option),
            balance=ledger.balance,
        )
