from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.db.models import GalleryEntry


async def list_entries(
    session: AsyncSession,
    *,
    limit: int,
    before_id: int | None = None,
) -> list[GalleryEntry]:
    """Return up to ``limit + 1`` entries newest first, strictly older than ``before_id``."""
    stmt = select(GalleryEntry).order_by(GalleryEntry.id.desc()).limit(limit + 1)
    if before_id is not None:
        stmt = stmt.where(GalleryEntry.id < before_id)
    return list((await session.execute(stmt)).scalars().all())


async def list_recent_entries(
    session: AsyncSession,
    *,
    limit: int,
) -> list[GalleryEntry]:
    stmt = (
        select(GalleryEntry)
        .order_by(GalleryEntry.timestamp.desc(), GalleryEntry.id.desc())
        .limit(limit)
    )
    return list((await session.execute(stmt)).scalars().all())


async def delete_entry(
    session: AsyncSession,
    *,
    entry_id: int,
) -> bool:
    result = await session.execute(delete(GalleryEntry).where(GalleryEntry.id == entry_id))
    await session.commit()
    return result.rowcount == 1


async def find_bot_token_for_file(
    session: AsyncSession,
    *,
    file_id: str,
) -> str | None:
    stmt = (
        select(GalleryEntry.bot_token)
        .where(GalleryEntry.file_id == file_id, GalleryEntry.bot_token.is_not(None))
        .limit(1)
    )
    return (await session.execute(stmt)).scalar_one_or_none()


async def create_entry(
    session: AsyncSession,
    *,
    prompt: str,
    metadata: dict[str, Any] | None = None,
    chat_id: str | None = None,
    file_id: str | None = None,
    bot_token: str | None = None,
    timestamp: datetime | None = None,
    commit: bool = True,
) -> GalleryEntry:
    entry = GalleryEntry(
        prompt=prompt,
        metadata_json=dict(metadata or {}),
        chat_id=chat_id,
        file_id=file_id,
        bot_token=bot_token,
    )
    if timestamp is not None:
        entry.timestamp = timestamp
    session.add(entry)
    if commit:
        await session.commit()
        await session.refresh(entry)
    return entry
