from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

logger = logging.getLogger(__name__)


def client_ip_from_headers(headers: Mapping[str, str]) -> str:
    direct = headers.get("cf-connecting-ip") or ""
    if direct:
        return direct.strip()
    forwarded = headers.get("x-forwarded-for") or ""
    return forwarded.split(",")[0].strip()


async def verify_turnstile_token(
    client: httpx.AsyncClient,
    *,
    token: str,
    remote_ip: str,
    secret_key: str,
    verify_url: str,
) -> bool:
    """Check a challenge token. Without a configured secret every token passes."""
    if not secret_key:
        return True

    try:
        response = await client.post(
            verify_url,
            json={"secret": secret_key, "response": token, "remoteip": remote_ip},
        )
        payload = response.json()
    except (httpx.HTTPError, ValueError):
        logger.warning("Turnstile verification request failed.", exc_info=True)
        return False
    return bool(isinstance(payload, dict) and payload.get("success"))
