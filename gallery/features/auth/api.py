from __future__ import annotations

import httpx
from fastapi import APIRouter, Body, Depends, HTTPException, Request

from gallery.core.http import get_http_client

from .errors import HumanVerificationError, InvalidCredentialsError
from .service import login
from .turnstile import client_ip_from_headers
from .types import LoginRequest, LoginResponse

router = APIRouter(prefix="/api", tags=["auth"])


def _raise_http_error(exc: Exception) -> None:
    if isinstance(exc, HumanVerificationError):
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    if isinstance(exc, InvalidCredentialsError):
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    raise exc


@router.post("/login", response_model=LoginResponse)
async def post_login(
    request: Request,
    payload: LoginRequest | None = Body(default=None),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> LoginResponse:
    body = payload or LoginRequest()
    try:
        token = await login(
            client,
            username=body.username,
            password=body.password,
            turnstile_token=body.turnstile_token,
            client_ip=client_ip_from_headers(request.headers),
        )
    except Exception as exc:
        _raise_http_error(exc)
    return LoginResponse(token=token)
