from __future__ import annotations

import hmac
import logging
from typing import Any

import httpx

from gallery.core.config import get_settings

from .errors import HumanVerificationError, InvalidCredentialsError
from .tokens import issue_token, verify_token
from .turnstile import verify_turnstile_token

logger = logging.getLogger(__name__)


def _matches(candidate: str | None, expected: str) -> bool:
    if not candidate:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


async def login(
    client: httpx.AsyncClient,
    *,
    username: str | None,
    password: str | None,
    turnstile_token: str | None,
    client_ip: str,
) -> str:
    settings = get_settings()

    if turnstile_token:
        verified = await verify_turnstile_token(
            client,
            token=turnstile_token,
            remote_ip=client_ip,
            secret_key=settings.turnstile_secret_key,
            verify_url=settings.turnstile_verify_url,
        )
        if not verified:
            raise HumanVerificationError("Human verification failed, please retry.")

    user_ok = _matches(username, settings.gallery_user)
    pass_ok = _matches(password, settings.gallery_pass)
    if not (user_ok and pass_ok):
        logger.info("Rejected login for user %r", username)
        raise InvalidCredentialsError("Invalid username or password.")

    return issue_token(
        username or "",
        secret=settings.jwt_secret,
        ttl_seconds=settings.jwt_ttl_seconds,
    )


def authenticate(authorization: str | None) -> dict[str, Any]:
    parts = (authorization or "").split(" ")
    token = parts[1] if len(parts) > 1 else ""
    return verify_token(token, secret=get_settings().jwt_secret)
