"""Vote admission rules, checked in order by VotingService.cast_vote."""

from datetime import datetime

from src.pv_common.enums import ValidationRule, VoteOption
from src.pv_common.errors import (
    InputValidationError,
    InsufficientFundsError,
    PoolExhaustedError,
    VotingClosedError,
)
from src.pv_ledger.domain.models import Ledger
from src.pv_project.domain.models import Project


def check_vote_points(points: int) -> None:
    if isinstance(points, bool) or not isinstance(points, int) or points < 1:
        raise InputValidationError(
            ValidationRule.VOTE_POINTS_NOT_POSITIVE, f"vote points must be >= 1, got {points}"
        )


def check_voting_open(project: Project, now: datetime) -> None:
    """Closed once the deadline passes or the result is published."""
    if project.result_published or now >= project.end_time:
        raise VotingClosedError(project.id)


def check_balance(ledger: Ledger, points: int) -> None:
    if points > ledger.balance:
        raise InsufficientFundsError(points, ledger.balance)


def check_pool(project: Project, option: VoteOption, points: int) -> None:
    # remaining <= max_points, so this also rejects points > max_points
    remaining = project.remaining_points(option)
    if points > remaining:
        raise PoolExhaustedError(option.value, points, remaining)
