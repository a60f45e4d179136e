"""pv_voting REST API: cast a vote on a project."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.pv_common.response import ApiResponse, success_response
from src.pv_gateway.auth.dependencies import get_current_user
from src.pv_session.api.dependencies import get_session_context
from src.pv_session.application.context import SessionContext
from src.pv_session.domain.models import UserIdentity
from src.pv_voting.application.schemas import CastVoteRequest
from src.pv_voting.application.service import VotingService

router = APIRouter(prefix="/projects", tags=["voting"])


@router.post("/{project_id}/votes")
async def cast_vote(
    project_id: str,
    body: CastVoteRequest,
    current_user: Annotated[UserIdentity, Depends(get_current_user)],
    ctx: Annotated[SessionContext, Depends(get_session_context)],
    request: Request,
) -> ApiResponse:
    data = await VotingService(ctx).cast_vote(current_user, project_id, body.option, body.points)
    return success_response(data.model_dump(mode="json"), request)
