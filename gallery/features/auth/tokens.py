from __future__ import annotations

import time
from typing import Any

import jwt

from .errors import InvalidTokenError, TokenExpiredError

_ALGORITHM = "HS256"


def issue_token(
    username: str,
    *,
    secret: str,
    ttl_seconds: int,
    now: float | None = None,
) -> str:
    issued_at = int(time.time() if now is None else now)
    payload = {
        "user": username,
        "iat": issued_at,
        "exp": issued_at + ttl_seconds,
    }
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


def verify_token(token: str, *, secret: str) -> dict[str, Any]:
    if not token:
        raise InvalidTokenError("No token")
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpiredError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError("Invalid token") from exc
