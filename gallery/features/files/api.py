from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.background import BackgroundTask

from gallery.core.config import get_settings
from gallery.core.http import get_http_client
from gallery.db.session import get_db_session
from gallery.features.shared.errors import bad_gateway

from .errors import MissingProviderCredentialError, ResourceResolutionError
from .service import open_file

router = APIRouter(prefix="/api", tags=["files"])


def _raise_http_error(exc: Exception) -> None:
    if isinstance(exc, ResourceResolutionError):
        raise bad_gateway(str(exc)) from exc
    if isinstance(exc, MissingProviderCredentialError):
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    raise exc


@router.get("/fileurl")
async def get_file_content(
    file_id: str | None = Query(default=None),
    session: AsyncSession = Depends(get_db_session),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> StreamingResponse:
    if not file_id:
        raise HTTPException(status_code=400, detail="file_id required")

    try:
        located = await open_file(session, client, file_id=file_id)
    except Exception as exc:
        _raise_http_error(exc)

    max_age = get_settings().file_max_age_seconds
    return StreamingResponse(
        located.response.aiter_bytes(),
        media_type=located.content_type,
        headers={"Cache-Control": f"public, max-age={max_age}, immutable"},
        background=BackgroundTask(located.aclose),
    )
