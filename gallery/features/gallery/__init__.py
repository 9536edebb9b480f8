from __future__ import annotations

from .errors import (
    GalleryDomainError,
    GalleryEntryNotFoundError,
    GalleryStoreError,
    GalleryValidationError,
)
from .service import (
    clamp_limit,
    delete_entry,
    find_bot_token,
    list_legacy,
    list_page,
    parse_cursor,
    wants_pagination,
)
from .types import GalleryDeleteResponse, GalleryItem, GalleryPage, ResourceRefPayload

__all__ = [
    "GalleryDeleteResponse",
    "GalleryDomainError",
    "GalleryEntryNotFoundError",
    "GalleryItem",
    "GalleryPage",
    "GalleryStoreError",
    "GalleryValidationError",
    "ResourceRefPayload",
    "clamp_limit",
    "delete_entry",
    "find_bot_token",
    "list_legacy",
    "list_page",
    "parse_cursor",
    "wants_pagination",
]
