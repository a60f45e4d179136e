"""Auth API router: sign-in, sign-out, me.

All endpoints return ApiResponse. request_id is read from request.state
(injected by RequestLogMiddleware).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from config.settings import settings
from src.pv_common.response import ApiResponse, success_response
from src.pv_gateway.api.schemas import SignInRequest, SignInResponse, UserInfo
from src.pv_gateway.auth.dependencies import get_current_user
from src.pv_gateway.auth.jwt_handler import create_access_token
from src.pv_gateway.auth.provider import TrustedAuthProvider
from src.pv_session.api.dependencies import get_session_context
from src.pv_session.application.context import SessionContext
from src.pv_session.application.service import SessionService
from src.pv_session.domain.models import UserIdentity

router = APIRouter(prefix="/auth", tags=["auth"])
_provider = TrustedAuthProvider()


@router.post(
    "/sign-in",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Sign in and open the points ledger on first visit",
)
async def sign_in(
    request: Request,
    body: SignInRequest,
    ctx: Annotated[SessionContext, Depends(get_session_context)],
) -> ApiResponse:
    result = await SessionService(ctx, _provider).sign_in(
        {"uid": body.uid, "display_name": body.display_name or ""}
    )
    data = SignInResponse(
        access_token=create_access_token(result.user),
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        user=UserInfo(uid=result.user.uid, display_name=result.user.display_name),
        balance=result.balance,
        is_new_user=result.is_new_user,
    )
    resp = success_response(data.model_dump(mode="json"), request)
    resp.message = "Signed in"
    return resp


@router.post("/sign-out", response_model=ApiResponse, summary="Sign out")
async def sign_out(
    request: Request,
    current_user: Annotated[UserIdentity, Depends(get_current_user)],
    ctx: Annotated[SessionContext, Depends(get_session_context)],
) -> ApiResponse:
    await SessionService(ctx, _provider).sign_out(current_user)
    resp = success_response(None, request)
    resp.message = "Signed out"
    return resp


@router.get("/me", response_model=ApiResponse, summary="Current identity")
async def me(
    request: Request,
    current_user: Annotated[UserIdentity, Depends(get_current_user)],
) -> ApiResponse:
    data = UserInfo(uid=current_user.uid, display_name=current_user.display_name)
    return success_response(data.model_dump(mode="json"), request)
