"""pv_project REST API: create, list, view, delete, hide. All require a Bearer token."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from src.pv_common.response import ApiResponse, success_response
from src.pv_gateway.auth.dependencies import get_current_user
from src.pv_project.application.schemas import CreateProjectRequest
from src.pv_project.application.service import ProjectApplicationService
from src.pv_session.api.dependencies import get_session_context
from src.pv_session.application.context import SessionContext
from src.pv_session.domain.models import UserIdentity

router = APIRouter(prefix="/projects", tags=["projects"])

CurrentUser = Annotated[UserIdentity, Depends(get_current_user)]
Context = Annotated[SessionContext, Depends(get_session_context)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    body: CreateProjectRequest, current_user: CurrentUser, ctx: Context, request: Request
) -> ApiResponse:
    data = await ProjectApplicationService(ctx).create_project(
        current_user, body.title, body.description, body.end_time, body.max_points
    )
    return success_response(data.model_dump(mode="json"), request)


@router.get("")
async def list_open_projects(
    current_user: CurrentUser, ctx: Context, request: Request
) -> ApiResponse:
    items = await ProjectApplicationService(ctx).list_open_projects()
    return success_response([i.model_dump(mode="json") for i in items], request)


@router.get("/mine/created")
async def list_created_projects(
    current_user: CurrentUser, ctx: Context, request: Request
) -> ApiResponse:
    items = await ProjectApplicationService(ctx).list_created_projects(current_user)
    return success_response([i.model_dump(mode="json") for i in items], request)


@router.get("/mine/participated")
async def list_participated_projects(
    current_user: CurrentUser, ctx: Context, request: Request
) -> ApiResponse:
    items = await ProjectApplicationService(ctx).list_participated_projects(current_user)
    return success_response([i.model_dump(mode="json") for i in items], request)


@router.get("/{project_id}")
async def get_project(
    project_id: str, current_user: CurrentUser, ctx: Context, request: Request
) -> ApiResponse:
    data = await ProjectApplicationService(ctx).get_project(current_user, project_id)
    return success_response(data.model_dump(mode="json"), request)


@router.delete("/{project_id}")
async def delete_project(
    project_id: str, current_user: CurrentUser, ctx: Context, request: Request
) -> ApiResponse:
    data = await ProjectApplicationService(ctx).delete_project(current_user, project_id)
    return success_response(data.model_dump(mode="json"), request)


@router.post("/{project_id}/hide")
async def hide_participation(
    project_id: str, current_user: CurrentUser, ctx: Context, request: Request
) -> ApiResponse:
    await ProjectApplicationService(ctx).hide_participation(current_user, project_id)
    return success_response({"project_id": project_id, "hidden": True}, request)
