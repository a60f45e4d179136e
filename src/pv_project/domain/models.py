"""Domain models for pv_project: pure dataclasses, no storage dependency."""

from dataclasses import dataclass, field
from datetime import datetime

from src.pv_common.enums import ProjectStatus, VoteOption


@dataclass(frozen=True)
class VoteRecord:
    """One stake on a project. `points` is returned to the voter if they win."""

    voter: str
    option: VoteOption
    points: int
    timestamp: datetime


@dataclass(frozen=True)
class UserVote:
    """Entry of the global vote log, keyed by project."""

    project_id: str
    user_id: str
    option: VoteOption
    points: int
    timestamp: datetime


@dataclass
class VoteTally:
    yes: int = 0
    no: int = 0

    def get(self, option: VoteOption) -> int:
        return self.yes if option is VoteOption.YES else self.no

    def add(self, option: VoteOption, points: int) -> None:
        if option is VoteOption.YES:
            self.yes += points
        else:
            self.no += points

    @property
    def total(self) -> int:
        return self.yes + self.no


@dataclass
class Project:
    id: str
    title: str
    description: str
    creator_id: str
    creator_name: str
    created_at: datetime
    end_time: datetime
    max_points: int          # creator escrow AND per-option pool cap
    frozen_points: int       # escrow still held; drained by settlement/delete
    votes: VoteTally = field(default_factory=VoteTally)
    voters: list[str] = field(default_factory=list)
    vote_details: list[VoteRecord] = field(default_factory=list)
    status: ProjectStatus = ProjectStatus.ACTIVE
    result: VoteOption | None = None
    result_published: bool = False
    forfeited_points: int = 0  # losing stakes, set at settlement

    def remaining_points(self, option: VoteOption) -> int:
        return max(0, self.max_points - self.votes.get(option))

    def is_open(self, now: datetime) -> bool:
        return not self.result_published and now < self.end_time

    @property
    def participant_count(self) -> int:
        return len({v.voter for v in self.vote_details})

    @property
    def open_stake(self) -> int:
        """Points staked by voters and not yet settled."""
        if self.result_published:
            return 0
        return sum(v.points for v in self.vote_details)
