"""FastAPI dependency: the process-wide SessionContext.

The context is opened on first use (whole collections loaded from the store)
and kept on app.state. Tests override `get_session_context` with a context
over an InMemoryKeyValueStore.
"""

import asyncio

from starlette.requests import Request

from config.settings import settings
from src.pv_session.application.context import SessionContext
from src.pv_store.infrastructure.factory import build_store

_open_lock = asyncio.Lock()


async def open_session_context() -> SessionContext:
    return await SessionContext.open(await build_store(), settings.LEDGER_HISTORY_LIMIT)


async def get_session_context(request: Request) -> SessionContext:
    ctx: SessionContext | None = getattr(request.app.state, "session_ctx", None)
    if ctx is None:
        async with _open_lock:
            ctx = getattr(request.app.state, "session_ctx", None)
            if ctx is None:
                ctx = await open_session_context()
                request.app.state.session_ctx = ctx
    return ctx
