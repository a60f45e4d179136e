"""Global enums: values are persisted in the store and must stay stable."""

from enum import Enum


class VoteOption(str, Enum):
    YES = "yes"
    NO = "no"


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    SETTLED = "settled"


class LedgerEntryType(str, Enum):
    # Account lifecycle
    INITIAL = "initial"
    WITHDRAW = "withdraw"
    # Project escrow (creator side)
    PROJECT_COST = "project_cost"
    PROJECT_DELETE = "project_delete"
    PROJECT_REFUND = "project_refund"
    PROJECT_REWARD_PAYOUT = "project_reward_payout"  # bookkeeping only, balance unchanged
    # Voting (voter side)
    VOTE_COST = "vote_cost"
    VOTE_RETURN = "vote_return"
    VOTE_REWARD = "vote_reward"


class ResidualPolicy(str, Enum):
    """What happens to the escrow left over after floor-rounded rewards."""
    RETAIN = "retain"
    CREATOR = "creator"
    LARGEST_STAKE = "largest_stake"


class ValidationRule(str, Enum):
    TITLE_REQUIRED = "TITLE_REQUIRED"
    TITLE_TOO_LONG = "TITLE_TOO_LONG"
    DESCRIPTION_REQUIRED = "DESCRIPTION_REQUIRED"
    DESCRIPTION_TOO_LONG = "DESCRIPTION_TOO_LONG"
    END_TIME_NOT_IN_FUTURE = "END_TIME_NOT_IN_FUTURE"
    MAX_POINTS_NOT_POSITIVE = "MAX_POINTS_NOT_POSITIVE"
    VOTE_POINTS_NOT_POSITIVE = "VOTE_POINTS_NOT_POSITIVE"
    WITHDRAW_AMOUNT_NOT_POSITIVE = "WITHDRAW_AMOUNT_NOT_POSITIVE"
    WITHDRAW_ADDRESS_INVALID = "WITHDRAW_ADDRESS_INVALID"
