from __future__ import annotations

import logging

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.core.config import get_settings
from gallery.features.gallery import find_bot_token

from .errors import MissingProviderCredentialError
from .locator import FileProvider, LocatedFile, ResourceLocator

logger = logging.getLogger(__name__)


def default_providers() -> list[FileProvider]:
    settings = get_settings()
    return [
        FileProvider(name="official", base_url=settings.file_api_base),
        FileProvider(name="proxy", base_url=settings.file_proxy_base),
    ]


async def resolve_bot_token(session: AsyncSession, *, file_id: str) -> str:
    """Prefer the credential stored with the entry, then the configured default."""
    bot_token: str | None = None
    try:
        bot_token = await find_bot_token(session, file_id=file_id)
    except (SQLAlchemyError, OSError):
        logger.warning("Bot token lookup for %s failed; using default.", file_id, exc_info=True)

    bot_token = bot_token or get_settings().bot_token or None
    if not bot_token:
        raise MissingProviderCredentialError("No bot token available")
    return bot_token


async def open_file(
    session: AsyncSession,
    client: httpx.AsyncClient,
    *,
    file_id: str,
) -> LocatedFile:
    bot_token = await resolve_bot_token(session, file_id=file_id)
    locator = ResourceLocator(client, default_providers())
    return await locator.open(file_id, bot_token=bot_token)
