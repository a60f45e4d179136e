"""Shared test fixtures.

JWT_SECRET has no default in Settings, so it is set before anything imports
config.settings.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("STORE_BACKEND", "memory")

from collections.abc import AsyncIterator, Awaitable, Callable  # noqa: E402
from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.main import app  # noqa: E402
from src.pv_common.datetime_utils import utc_now  # noqa: E402
from src.pv_gateway.auth.provider import TrustedAuthProvider  # noqa: E402
from src.pv_session.api.dependencies import get_session_context  # noqa: E402
from src.pv_session.application.context import SessionContext  # noqa: E402
from src.pv_session.application.service import SessionService  # noqa: E402
from src.pv_session.domain.models import UserIdentity  # noqa: E402
from src.pv_store.infrastructure.memory_store import InMemoryKeyValueStore  # noqa: E402


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
async def ctx(store: InMemoryKeyValueStore) -> SessionContext:
    return await SessionContext.open(store, history_limit=100)


@pytest.fixture
def sign_in(ctx: SessionContext) -> Callable[[str], Awaitable[UserIdentity]]:
    """Sign a user in through SessionService; new users get the signup bonus."""

    async def _sign_in(uid: str) -> UserIdentity:
        result = await SessionService(ctx, TrustedAuthProvider()).sign_in({"uid": uid})
        return result.user

    return _sign_in


@pytest.fixture
def tomorrow() -> datetime:
    return utc_now() + timedelta(days=1)


@pytest.fixture
async def client(ctx: SessionContext) -> AsyncIterator[AsyncClient]:
    """Async HTTP client over the app, bound to a fresh in-memory session."""
    app.dependency_overrides[get_session_context] = lambda: ctx
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
