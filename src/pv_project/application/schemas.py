"""Pydantic schemas for pv_project API."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.pv_common.enums import VoteOption
from src.pv_project.domain.models import Project

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateProjectRequest(BaseModel):
    title: str
    description: str
    end_time: datetime
    max_points: int = Field(..., description="Escrow frozen from the creator and per-option cap")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ProjectListItem(BaseModel):
    id: str
    title: str
    description: str
    creator_id: str
    creator_name: str
    end_time: str
    created_at: str
    participant_count: int
    result_published: bool
    result: VoteOption | None

    @classmethod
    def from_domain(cls, p: Project) -> "ProjectListItem":
        return cls(
            id=p.id,
            title=p.title,
            description=p.description,
            creator_id=p.creator_id,
            creator_name=p.creator_name,
            end_time=p.end_time.isoformat(),
            created_at=p.created_at.isoformat(),
            participant_count=p.participant_count,
            result_published=p.result_published,
            result=p.result,
        )


class ProjectDetail(ProjectListItem):
    max_points: int
    frozen_points: int
    remaining_yes: int
    remaining_no: int
    # Per-option tallies are only shown to the creator
    votes_yes: int | None = None
    votes_no: int | None = None

    @classmethod
    def for_viewer(cls, p: Project, viewer_id: str) -> "ProjectDetail":
        base = ProjectListItem.from_domain(p).model_dump()
        is_creator = viewer_id == p.creator_id
        return cls(
            **base,
            max_points=p.max_points,
            frozen_points=p.frozen_points,
            remaining_yes=p.remaining_points(VoteOption.YES),
            remaining_no=p.remaining_points(VoteOption.NO),
            votes_yes=p.votes.yes if is_creator else None,
            votes_no=p.votes.no if is_creator else None,
        )


class CreatedProjectItem(ProjectListItem):
    votes_yes: int
    votes_no: int
    can_delete: bool
    can_publish: bool

    @classmethod
    def from_project(cls, p: Project) -> "CreatedProjectItem":
        has_votes = bool(p.vote_details)
        return cls(
            **ProjectListItem.from_domain(p).model_dump(),
            votes_yes=p.votes.yes,
            votes_no=p.votes.no,
            can_delete=not has_votes or p.result_published,
            can_publish=has_votes and not p.result_published,
        )


class ParticipatedProjectItem(ProjectListItem):
    my_vote_count: int
    my_yes_points: int
    my_no_points: int


class CreateProjectResponse(BaseModel):
    project: ProjectDetail
    balance: int


class DeleteProjectResponse(BaseModel):
    project_id: str
    refunded_points: int
    balance: int
