"""Integration-test fixtures.

The app runs in-process over ASGITransport against the in-memory session from
the root conftest, so no Redis is needed.
"""

from collections.abc import Awaitable, Callable

import pytest
from httpx import AsyncClient

Login = Callable[[str], Awaitable[dict[str, str]]]


@pytest.fixture
def login(client: AsyncClient) -> Login:
    """Sign a user in over HTTP and return their Authorization header."""

    async def _login(uid: str) -> dict[str, str]:
        resp = await client.post("/api/v1/auth/sign-in", json={"uid": uid})
        assert resp.status_code == 200
        token = resp.json()["data"]["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _login
