"""JWT access token creation and verification (HS256, shared JWT_SECRET).

Tokens carry the stable uid in `sub` and the optional display name in `name`.
No refresh tokens: a client signs in again when the access token expires.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.pv_common.errors import InvalidCredentialsError
from src.pv_session.domain.models import UserIdentity

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(user: UserIdentity) -> str:
    now = datetime.now(UTC)
    payload: dict[str, object] = {
        "sub": user.uid,
        "type": "access",
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    if user.display_name:
        payload["name"] = user.display_name
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_access_token(token: str) -> UserIdentity:
    """Decode and validate an access token.

    Raises:
        InvalidCredentialsError: signature, expiry, type or subject is invalid.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    uid = payload.get("sub")
    if payload.get("type") != "access" or not uid:
        raise InvalidCredentialsError()
    return UserIdentity(uid=str(uid), display_name=payload.get("name"))
