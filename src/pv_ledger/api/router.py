"""pv_ledger REST API: balance, history, withdraw. All require a Bearer token."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.pv_common.enums import LedgerEntryType
from src.pv_common.response import ApiResponse, success_response
from src.pv_gateway.auth.dependencies import get_current_user
from src.pv_ledger.application.schemas import WithdrawRequest
from src.pv_ledger.application.service import LedgerApplicationService
from src.pv_session.api.dependencies import get_session_context
from src.pv_session.application.context import SessionContext
from src.pv_session.domain.models import UserIdentity

router = APIRouter(prefix="/ledger", tags=["ledger"])


@router.get("/balance")
async def get_balance(
    current_user: Annotated[UserIdentity, Depends(get_current_user)],
    ctx: Annotated[SessionContext, Depends(get_session_context)],
    request: Request,
) -> ApiResponse:
    data = await LedgerApplicationService(ctx).get_balance(current_user.uid)
    return success_response(data.model_dump(mode="json"), request)


@router.get("/history")
async def get_history(
    current_user: Annotated[UserIdentity, Depends(get_current_user)],
    ctx: Annotated[SessionContext, Depends(get_session_context)],
    request: Request,
    entry_type: LedgerEntryType | None = Query(None, description="Filter by LedgerEntryType"),
) -> ApiResponse:
    data = await LedgerApplicationService(ctx).get_history(current_user.uid, entry_type)
    return success_response(data.model_dump(mode="json"), request)


@router.post("/withdraw")
async def withdraw(
    body: WithdrawRequest,
    current_user: Annotated[UserIdentity, Depends(get_current_user)],
    ctx: Annotated[SessionContext, Depends(get_session_context)],
    request: Request,
) -> ApiResponse:
    data = await LedgerApplicationService(ctx).withdraw(
        current_user.uid, body.address, body.amount
    )
    return success_response(data.model_dump(mode="json"), request)
