from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .errors import GalleryResponseError
from .types import Entry, Page, ResourceRef


def _coerce_optional_str(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    return value


class ResourceRefPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    chat_id: str | None = None
    file_id: str | None = None

    @field_validator("chat_id", "file_id", mode="before")
    @classmethod
    def coerce_refs(cls, value: Any) -> Any:
        return _coerce_optional_str(value)


class EntryPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    prompt: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)
    telegram: ResourceRefPayload = Field(default_factory=ResourceRefPayload)
    timestamp: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _coerce_optional_str(value)

    @field_validator("prompt", mode="before")
    @classmethod
    def default_prompt(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("metadata", mode="before")
    @classmethod
    def default_metadata(cls, value: Any) -> Any:
        return {} if value is None else value

    def to_entry(self) -> Entry:
        return Entry(
            id=self.id,
            prompt=self.prompt,
            metadata=dict(self.metadata),
            resource_ref=ResourceRef(file_id=self.telegram.file_id, chat_id=self.telegram.chat_id),
            timestamp=self.timestamp,
        )

    @classmethod
    def from_entry(cls, entry: Entry) -> EntryPayload:
        return cls(
            id=entry.id,
            prompt=entry.prompt,
            metadata=dict(entry.metadata),
            telegram=ResourceRefPayload(
                chat_id=entry.resource_ref.chat_id,
                file_id=entry.resource_ref.file_id,
            ),
            timestamp=entry.timestamp,
        )


class PagePayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    items: list[EntryPayload]
    has_more: bool = Field(default=False, alias="hasMore")
    next_cursor: str | None = Field(default=None, alias="nextCursor")
    limit: int | None = None

    @field_validator("next_cursor", mode="before")
    @classmethod
    def coerce_cursor(cls, value: Any) -> Any:
        return _coerce_optional_str(value)


# Paginated servers answer with an object; legacy servers with a bare list.
GalleryResponse = PagePayload | list[EntryPayload]
_response_adapter: TypeAdapter[GalleryResponse] = TypeAdapter(GalleryResponse)


def normalize_page(payload: Any) -> Page:
    try:
        parsed = _response_adapter.validate_python(payload)
    except ValidationError as exc:
        raise GalleryResponseError(f"Malformed gallery response: {exc.error_count()} error(s).") from exc

    if isinstance(parsed, list):
        return Page(items=[item.to_entry() for item in parsed], has_more=False, next_cursor=None)

    next_cursor = parsed.next_cursor or None
    return Page(
        items=[item.to_entry() for item in parsed.items],
        has_more=bool(parsed.has_more and next_cursor),
        next_cursor=next_cursor if parsed.has_more else None,
    )
