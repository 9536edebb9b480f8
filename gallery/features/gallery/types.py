from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResourceRefPayload(BaseModel):
    chat_id: str | None = None
    file_id: str | None = None


class GalleryItem(BaseModel):
    id: str
    prompt: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    telegram: ResourceRefPayload
    timestamp: datetime | None = None


class GalleryPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: list[GalleryItem]
    has_more: bool = Field(alias="hasMore")
    next_cursor: str | None = Field(alias="nextCursor")
    limit: int


class GalleryDeleteRequest(BaseModel):
    id: str | int | None = None


class GalleryDeleteResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    deleted_id: str = Field(alias="deletedId")
