"""Domain models for pv_session: the in-memory view of everything persisted."""

from dataclasses import dataclass, field

from src.pv_ledger.domain.models import Ledger
from src.pv_project.domain.models import Project, UserVote


@dataclass(frozen=True)
class UserIdentity:
    uid: str
    display_name: str | None = None

    @property
    def label(self) -> str:
        return self.display_name or self.uid


@dataclass
class PointsSupply:
    """Running totals needed to check conservation across all ledgers."""

    granted: int = 0     # signup bonuses
    withdrawn: int = 0   # withdrawals including fees
    accounts: list[str] = field(default_factory=list)  # every uid with a ledger


@dataclass
class SessionState:
    current_user: UserIdentity | None = None
    projects: list[Project] = field(default_factory=list)       # newest first
    user_votes: list[UserVote] = field(default_factory=list)
    hidden: set[tuple[str, str]] = field(default_factory=set)   # (user_id, project_id)
    ledgers: dict[str, Ledger] = field(default_factory=dict)    # loaded on demand
    supply: PointsSupply = field(default_factory=PointsSupply)

    def find_project(self, project_id: str) -> Project | None:
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    def is_hidden(self, user_id: str, project_id: str) -> bool:
        return (user_id, project_id) in self.hidden

    def hide(self, user_id: str, project_id: str) -> None:
        self.hidden.add((user_id, project_id))
