from __future__ import annotations

from typing import Any

from fastapi import Header, HTTPException

from .errors import InvalidTokenError
from .service import authenticate


async def require_bearer(authorization: str | None = Header(default=None)) -> dict[str, Any]:
    try:
        return authenticate(authorization)
    except InvalidTokenError as exc:
        raise HTTPException(status_code=401, detail="Unauthorized") from exc
