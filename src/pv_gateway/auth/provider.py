"""Authentication collaborator.

The points engine only needs a stable, unique `uid` per principal. Identity
provisioning lives outside this service; `TrustedAuthProvider` is the
development provider that accepts the uid it is given.
"""

import re
from typing import Protocol

from src.pv_common.errors import InvalidCredentialsError
from src.pv_session.domain.models import UserIdentity

_UID_RE = re.compile(r"^[A-Za-z0-9_.@-]{1,64}$")


class AuthProviderProtocol(Protocol):
    async def authenticate(self, credentials: dict[str, str]) -> UserIdentity: ...

    async def sign_out(self, uid: str) -> None: ...


class TrustedAuthProvider:
    """Accepts {"uid": ..., "display_name": ...} as-is after a format check."""

    async def authenticate(self, credentials: dict[str, str]) -> UserIdentity:
        uid = (credentials.get("uid") or "").strip()
        if not _UID_RE.match(uid):
            raise InvalidCredentialsError()
        display_name = (credentials.get("display_name") or "").strip() or None
        return UserIdentity(uid=uid, display_name=display_name)

    async def sign_out(self, uid: str) -> None:
        return None
