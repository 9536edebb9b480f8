from __future__ import annotations

from fastapi import HTTPException


def not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=404, detail=detail)


def bad_gateway(detail: str) -> HTTPException:
    return HTTPException(status_code=502, detail=detail)
