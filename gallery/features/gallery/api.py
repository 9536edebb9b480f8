from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from gallery.core.config import get_settings
from gallery.db.session import get_db_session
from gallery.features.auth import require_bearer
from gallery.features.shared.errors import not_found

from .errors import GalleryEntryNotFoundError, GalleryStoreError, GalleryValidationError
from .service import clamp_limit, delete_entry, list_legacy, list_page, parse_cursor, wants_pagination
from .types import GalleryDeleteRequest, GalleryDeleteResponse, GalleryItem, GalleryPage

router = APIRouter(prefix="/api/gallery", tags=["gallery"])


def _raise_http_error(exc: Exception) -> None:
    if isinstance(exc, GalleryEntryNotFoundError):
        raise not_found(str(exc)) from exc
    if isinstance(exc, GalleryValidationError):
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if isinstance(exc, GalleryStoreError):
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    raise exc


@router.get("", response_model=GalleryPage | list[GalleryItem])
async def get_gallery(
    response: Response,
    limit: str | None = Query(default=None),
    cursor: str | None = Query(default=None),
    _claims: dict[str, Any] = Depends(require_bearer),
    session: AsyncSession = Depends(get_db_session),
) -> GalleryPage | list[GalleryItem]:
    response.headers["Cache-Control"] = (
        f"public, max-age={get_settings().gallery_list_max_age_seconds}"
    )
    if not wants_pagination(limit, cursor):
        return await list_legacy(session)

    try:
        decoded_cursor = parse_cursor(cursor)
    except Exception as exc:
        _raise_http_error(exc)
    return await list_page(session, limit=clamp_limit(limit), cursor=decoded_cursor)


@router.delete("", response_model=GalleryDeleteResponse)
async def remove_gallery_entry(
    payload: GalleryDeleteRequest | None = Body(default=None),
    _claims: dict[str, Any] = Depends(require_bearer),
    session: AsyncSession = Depends(get_db_session),
) -> GalleryDeleteResponse:
    entry_id = payload.id if payload is not None else None
    try:
        deleted_id = await delete_entry(session, entry_id=entry_id)
    except Exception as exc:
        _raise_http_error(exc)
    return GalleryDeleteResponse(ok=True, deleted_id=deleted_id)
