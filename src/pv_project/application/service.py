"""ProjectApplicationService: project lifecycle and read-side views.

create_project freezes the creator's escrow; delete_project releases whatever
escrow is still held and hides the project from the creator only. Projects are
never physically removed: other participants keep seeing them.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from src.pv_common.datetime_utils import utc_now
from src.pv_common.enums import LedgerEntryType, VoteOption
from src.pv_common.errors import (
    ForbiddenError,
    ProjectNotFoundError,
    SettlementNotDoneError,
    SettlementRequiredError,
)
from src.pv_common.id_generator import generate_project_id
from src.pv_project.application.schemas import (
    CreatedProjectItem,
    CreateProjectResponse,
    DeleteProjectResponse,
    ParticipatedProjectItem,
    ProjectDetail,
    ProjectListItem,
)
from src.pv_project.domain.models import Project
from src.pv_project.domain.validation import validate_new_project
from src.pv_session.application.context import SessionContext
from src.pv_session.domain.models import SessionState, UserIdentity

logger = logging.getLogger(__name__)


def get_project_or_raise(state: SessionState, project_id: str) -> Project:
    project = state.find_project(project_id)
    if project is None:
        raise ProjectNotFoundError(project_id)
    return project


class ProjectApplicationService:
    def __init__(
        self, ctx: SessionContext, clock: Callable[[], datetime] = utc_now
    ) -> None:
        self._ctx = ctx
        self._clock = clock

    # -----------------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------------

    async def create_project(
        self,
        creator: UserIdentity,
        title: str,
        description: str,
        end_time: datetime,
        max_points: int,
    ) -> CreateProjectResponse:
        now = self._clock()
        title, description, end_time = validate_new_project(
            title, description, end_time, max_points, now
        )

        async with self._ctx.transaction() as state:
            ledger = await self._ctx.ledger_for(state, creator.uid)
            # raises InsufficientFundsError when max_points > balance
            ledger.debit(max_points, LedgerEntryType.PROJECT_COST, f"Create project - {title}")
            project = Project(
                id=generate_project_id(),
                title=title,
                description=description,
                creator_id=creator.uid,
                creator_name=creator.label,
                created_at=now,
                end_time=end_time,
                max_points=max_points,
                frozen_points=max_points,
            )
            state.projects.insert(0, project)

        logger.info(
            "Project created: id=%s creator=%s escrow=%d", project.id, creator.uid, max_points
        )
        return CreateProjectResponse(
            project=ProjectDetail.for_viewer(project, creator.uid), balance=ledger.balance
        )

    async def delete_project(self, actor: UserIdentity, project_id: str) -> DeleteProjectResponse:
        async with self._ctx.transaction() as state:
            project = get_project_or_raise(state, project_id)
            if project.creator_id != actor.uid:
                raise ForbiddenError(actor.uid, project_id)
            if project.vote_details and not project.result_published:
                raise SettlementRequiredError(project_id)

            refund = project.frozen_points
            ledger = await self._ctx.ledger_for(state, actor.uid)
            ledger.credit(refund, LedgerEntryType.PROJECT_DELETE, f"Delete project - {project.title}")
            project.frozen_points = 0
            state.hide(actor.uid, project_id)

        logger.info("Project deleted: id=%s creator=%s refund=%d", project_id, actor.uid, refund)
        return DeleteProjectResponse(
            project_id=project_id, refunded_points=refund, balance=ledger.balance
        )

    async def hide_participation(self, actor: UserIdentity, project_id: str) -> None:
        async with self._ctx.transaction() as state:
            project = get_project_or_raise(state, project_id)
            if not project.result_published:
                raise SettlementNotDoneError(project_id)
            state.hide(actor.uid, project_id)

    # -----------------------------------------------------------------------
    # Views
    # -----------------------------------------------------------------------

    async def get_project(self, viewer: UserIdentity, project_id: str) -> ProjectDetail:
        async with self._ctx.reading() as state:
            project = get_project_or_raise(state, project_id)
            return ProjectDetail.for_viewer(project, viewer.uid)

    async def list_open_projects(self) -> list[ProjectListItem]:
        now = self._clock()
        async with self._ctx.reading() as state:
            projects = [p for p in state.projects if p.is_open(now)]
        projects.sort(key=lambda p: p.created_at, reverse=True)
        return [ProjectListItem.from_domain(p) for p in projects]

    async def list_created_projects(self, user: UserIdentity) -> list[CreatedProjectItem]:
        async with self._ctx.reading() as state:
            return [
                CreatedProjectItem.from_project(p)
                for p in state.projects
                if p.creator_id == user.uid and not state.is_hidden(user.uid, p.id)
            ]

    async def list_participated_projects(
        self, user: UserIdentity
    ) -> list[ParticipatedProjectItem]:
        async with self._ctx.reading() as state:
            mine = [v for v in state.user_votes if v.user_id == user.uid]
            voted_ids = {v.project_id for v in mine}
            items = []
            for p in state.projects:
                if p.id not in voted_ids or state.is_hidden(user.uid, p.id):
                    continue
                votes = [v for v in mine if v.project_id == p.id]
                items.append(
                    ParticipatedProjectItem(
                        **ProjectListItem.from_domain(p).model_dump(),
                        my_vote_count=len(votes),
                        my_yes_points=sum(v.points for v in votes if v.option is VoteOption.YES),
                        my_no_points=sum(v.points for v in votes if v.option is VoteOption.NO),
                    )
                )
            return items
