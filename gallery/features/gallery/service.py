from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.core.config import get_settings
from gallery.db.models import GalleryEntry
from gallery.features.shared.ids import parse_entry_id

from . import repo
from .errors import GalleryEntryNotFoundError, GalleryStoreError, GalleryValidationError
from .types import GalleryItem, GalleryPage, ResourceRefPayload

logger = logging.getLogger(__name__)


def wants_pagination(limit_raw: str | None, cursor_raw: str | None) -> bool:
    """Older clients send neither parameter and expect a flat list."""
    return limit_raw is not None or bool((cursor_raw or "").strip())


def clamp_limit(limit_raw: str | int | None) -> int:
    settings = get_settings()
    try:
        parsed = int(str(limit_raw).strip()) if limit_raw is not None else None
    except ValueError:
        parsed = None
    if parsed is None:
        return settings.gallery_default_page_size
    return max(1, min(parsed, settings.gallery_max_page_size))


def parse_cursor(cursor_raw: str | None) -> int | None:
    cursor = (cursor_raw or "").strip()
    if not cursor:
        return None
    try:
        return parse_entry_id(cursor)
    except ValueError as exc:
        raise GalleryValidationError("Invalid cursor") from exc


def _to_item(row: GalleryEntry) -> GalleryItem:
    return GalleryItem(
        id=str(row.id),
        prompt=row.prompt or "",
        metadata=row.metadata_json or {},
        telegram=ResourceRefPayload(chat_id=row.chat_id, file_id=row.file_id),
        timestamp=row.timestamp,
    )


async def list_page(
    session: AsyncSession,
    *,
    limit: int,
    cursor: int | None = None,
) -> GalleryPage:
    rows = await repo.list_entries(session, limit=limit, before_id=cursor)
    has_more = len(rows) > limit
    page_rows = rows[:limit]
    next_cursor = str(page_rows[-1].id) if has_more and page_rows else None
    return GalleryPage(
        items=[_to_item(row) for row in page_rows],
        has_more=has_more,
        next_cursor=next_cursor,
        limit=limit,
    )


async def list_legacy(session: AsyncSession) -> list[GalleryItem]:
    rows = await repo.list_recent_entries(session, limit=get_settings().gallery_legacy_limit)
    return [_to_item(row) for row in rows]


async def delete_entry(
    session: AsyncSession,
    *,
    entry_id: str | int | None,
) -> str:
    if entry_id is None or (isinstance(entry_id, str) and not entry_id.strip()):
        raise GalleryValidationError("Missing id")
    try:
        parsed_id = parse_entry_id(entry_id)
    except ValueError as exc:
        raise GalleryValidationError("Invalid id") from exc

    try:
        deleted = await repo.delete_entry(session, entry_id=parsed_id)
    except SQLAlchemyError as exc:
        logger.error("Deleting gallery entry %s failed: %s", parsed_id, exc)
        raise GalleryStoreError(str(exc)) from exc
    if not deleted:
        raise GalleryEntryNotFoundError("Not found")
    logger.info("Deleted gallery entry %s", parsed_id)
    return str(parsed_id)


async def find_bot_token(
    session: AsyncSession,
    *,
    file_id: str,
) -> str | None:
    return await repo.find_bot_token_for_file(session, file_id=file_id)
