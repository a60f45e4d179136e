"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.pv_common.errors import AppError
from src.pv_common.redis_client import close_redis
from src.pv_common.response import error_response
from src.pv_gateway.api.router import router as auth_router
from src.pv_gateway.middleware.request_log import RequestLogMiddleware
from src.pv_ledger.api.router import router as ledger_router
from src.pv_project.api.router import router as project_router
from src.pv_session.api.dependencies import open_session_context
from src.pv_settlement.api.router import router as settlement_router
from src.pv_voting.api.router import router as voting_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: load every collection from the store. Shutdown: close Redis."""
    app.state.session_ctx = await open_session_context()
    logger.info("Session state loaded (backend=%s)", settings.STORE_BACKEND)
    yield
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, request)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(ledger_router, prefix="/api/v1")
app.include_router(project_router, prefix="/api/v1")
app.include_router(voting_router, prefix="/api/v1")
app.include_router(settlement_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
