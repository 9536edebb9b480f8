from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from .errors import ResourceResolutionError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"


@dataclass(frozen=True)
class FileProvider:
    """A file-hosting endpoint speaking the ``getFile`` protocol."""

    name: str
    base_url: str

    def lookup_url(self, bot_token: str) -> str:
        return f"{self.base_url.rstrip('/')}/bot{bot_token}/getFile"

    def download_url(self, bot_token: str, file_path: str) -> str:
        return f"{self.base_url.rstrip('/')}/file/bot{bot_token}/{file_path}"


@dataclass
class LocatedFile:
    provider: str
    content_type: str
    response: httpx.Response

    async def aclose(self) -> None:
        await self.response.aclose()


class ResourceLocator:
    """Resolve a file reference to its bytes, trying each provider in order."""

    def __init__(self, client: httpx.AsyncClient, providers: Sequence[FileProvider]):
        if not providers:
            raise ValueError("ResourceLocator needs at least one provider.")
        self._client = client
        self._providers = tuple(providers)

    @property
    def providers(self) -> tuple[FileProvider, ...]:
        return self._providers

    async def _lookup_file_path(
        self,
        provider: FileProvider,
        *,
        bot_token: str,
        file_id: str,
    ) -> str | None:
        response = await self._client.get(
            provider.lookup_url(bot_token),
            params={"file_id": file_id},
        )
        payload = response.json()
        if not isinstance(payload, dict) or not payload.get("ok"):
            return None
        result = payload.get("result")
        if not isinstance(result, dict):
            return None
        file_path = result.get("file_path")
        if not isinstance(file_path, str) or not file_path:
            return None
        return file_path

    async def _open_from(
        self,
        provider: FileProvider,
        *,
        bot_token: str,
        file_id: str,
    ) -> LocatedFile | None:
        file_path = await self._lookup_file_path(provider, bot_token=bot_token, file_id=file_id)
        if file_path is None:
            return None

        request = self._client.build_request("GET", provider.download_url(bot_token, file_path))
        response = await self._client.send(request, stream=True)
        if not response.is_success:
            await response.aclose()
            return None
        return LocatedFile(
            provider=provider.name,
            content_type=response.headers.get("content-type") or DEFAULT_CONTENT_TYPE,
            response=response,
        )

    async def open(self, file_id: str, *, bot_token: str) -> LocatedFile:
        """Return an open streaming response; the caller must ``aclose`` it."""
        for provider in self._providers:
            try:
                located = await self._open_from(provider, bot_token=bot_token, file_id=file_id)
            except (httpx.HTTPError, ValueError):
                logger.warning(
                    "File provider %s failed for %s; trying next provider.",
                    provider.name,
                    file_id,
                    exc_info=True,
                )
                continue
            if located is not None:
                return located
            logger.info("File provider %s had no usable path for %s.", provider.name, file_id)
        raise ResourceResolutionError("Failed to retrieve file URL")
