from __future__ import annotations

import httpx

from gallery.core.config import get_settings

_client: httpx.AsyncClient | None = None


def _build_client() -> httpx.AsyncClient:
    settings = get_settings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.upstream_timeout_seconds),
        follow_redirects=True,
    )


async def get_http_client() -> httpx.AsyncClient:
    """Shared outbound client for upstream providers; closed on app shutdown."""
    global _client
    if _client is None or _client.is_closed:
        _client = _build_client()
    return _client


async def close_http_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
