"""pv_settlement REST API: publish a result; invariant report."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.pv_common.response import ApiResponse, success_response
from src.pv_gateway.auth.dependencies import get_current_user
from src.pv_session.api.dependencies import get_session_context
from src.pv_session.application.context import SessionContext
from src.pv_session.domain.models import UserIdentity
from src.pv_settlement.application.schemas import PublishResultRequest
from src.pv_settlement.application.service import SettlementService

router = APIRouter(tags=["settlement"])


@router.post("/projects/{project_id}/result")
async def publish_result(
    project_id: str,
    body: PublishResultRequest,
    current_user: Annotated[UserIdentity, Depends(get_current_user)],
    ctx: Annotated[SessionContext, Depends(get_session_context)],
    request: Request,
) -> ApiResponse:
    data = await SettlementService(ctx).publish_result(current_user, project_id, body.result)
    return success_response(data.model_dump(mode="json"), request)


@router.get("/admin/invariants")
async def verify_invariants(
    current_user: Annotated[UserIdentity, Depends(get_current_user)],
    ctx: Annotated[SessionContext, Depends(get_session_context)],
    request: Request,
) -> ApiResponse:
    data = await SettlementService(ctx).verify_all_invariants()
    return success_response(data, request)
