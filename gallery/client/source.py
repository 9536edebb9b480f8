from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from .errors import (
    GalleryEntryNotFoundError,
    GalleryResolutionError,
    GalleryResponseError,
    GalleryServerError,
    GalleryTransportError,
    GalleryUnauthorizedError,
    GalleryValidationError,
)
from .schemas import normalize_page
from .types import Page, ResourceRef

logger = logging.getLogger(__name__)

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 200


class PaginationSource(Protocol):
    async def fetch_page(self, cursor: str | None, limit: int) -> Page: ...

    async def delete_entry(self, entry_id: str) -> None: ...

    async def resolve_display_url(self, ref: ResourceRef) -> str: ...


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(payload, dict):
        detail = payload.get("detail") or payload.get("error")
        if detail:
            return str(detail)
    return response.reason_phrase


def raise_for_gallery_status(response: httpx.Response) -> None:
    status = response.status_code
    if status < 400:
        return
    detail = _error_detail(response)
    if status in (401, 403):
        raise GalleryUnauthorizedError(detail)
    if status == 404:
        raise GalleryEntryNotFoundError(detail)
    if status == 502:
        raise GalleryResolutionError(detail)
    if status >= 500:
        raise GalleryServerError(detail)
    raise GalleryValidationError(detail)


class HttpGallerySource:
    """Pagination source backed by the gallery HTTP API."""

    def __init__(self, client: httpx.AsyncClient, *, token: str | None = None):
        self._client = client
        self._token = token

    @property
    def token(self) -> str | None:
        return self._token

    @token.setter
    def token(self, value: str | None) -> None:
        self._token = value

    def _auth_headers(self) -> dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = {**self._auth_headers(), **kwargs.pop("headers", {})}
        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            raise GalleryTransportError(f"{method} {path} failed: {exc}") from exc
        raise_for_gallery_status(response)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise GalleryResponseError("Gallery response was not JSON.") from exc

    async def login(
        self,
        username: str,
        password: str,
        *,
        turnstile_token: str | None = None,
    ) -> str:
        body: dict[str, str] = {"username": username, "password": password}
        if turnstile_token:
            body["turnstileToken"] = turnstile_token
        response = await self._request("POST", "/api/login", json=body)
        payload = self._json(response)
        token = payload.get("token") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise GalleryResponseError("Login response did not contain a token.")
        self._token = token
        return token

    async def fetch_page(self, cursor: str | None, limit: int) -> Page:
        if not MIN_PAGE_SIZE <= limit <= MAX_PAGE_SIZE:
            raise ValueError(f"limit must be within {MIN_PAGE_SIZE}..{MAX_PAGE_SIZE}, got {limit}.")
        params: dict[str, str | int] = {"limit": limit}
        if cursor:
            params["cursor"] = cursor
        response = await self._request("GET", "/api/gallery", params=params)
        return normalize_page(self._json(response))

    async def fetch_legacy(self) -> Page:
        response = await self._request("GET", "/api/gallery")
        return normalize_page(self._json(response))

    async def delete_entry(self, entry_id: str) -> None:
        await self._request("DELETE", "/api/gallery", json={"id": entry_id})
        logger.debug("Server confirmed deletion of %s", entry_id)

    def display_url_for(self, ref: ResourceRef) -> str:
        url = self._client.base_url.join("api/fileurl").copy_merge_params({"file_id": ref.file_id or ""})
        return str(url)

    async def resolve_display_url(self, ref: ResourceRef) -> str:
        """Confirm the resource endpoint can serve ``ref`` and return its URL."""
        if not ref.file_id:
            raise GalleryResolutionError("Entry has no file reference.")
        try:
            async with self._client.stream(
                "GET",
                "/api/fileurl",
                params={"file_id": ref.file_id},
            ) as response:
                if response.status_code >= 400:
                    await response.aread()
                raise_for_gallery_status(response)
        except httpx.HTTPError as exc:
            raise GalleryTransportError(f"Resolving {ref.file_id} failed: {exc}") from exc
        return self.display_url_for(ref)
