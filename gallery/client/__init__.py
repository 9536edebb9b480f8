from __future__ import annotations

from .cache import CacheStore, GalleryCache, JsonFileCacheStore, MemoryCacheStore
from .config import ClientSettings, get_client_settings
from .errors import (
    GalleryClientError,
    GalleryEntryNotFoundError,
    GalleryResolutionError,
    GalleryResponseError,
    GalleryServerError,
    GalleryTransportError,
    GalleryUnauthorizedError,
    GalleryValidationError,
)
from .mutations import MutationEngine
from .schemas import normalize_page
from .session import GallerySession
from .source import HttpGallerySource, PaginationSource
from .state import GalleryState
from .sync import SyncEngine
from .triggers import RefreshTimer, SentinelObserver, TriggerKind, TriggerQueue
from .types import (
    BatchReport,
    DeleteOutcome,
    Entry,
    MutationState,
    Page,
    PendingDeletion,
    ResourceRef,
)

__all__ = [
    "BatchReport",
    "CacheStore",
    "ClientSettings",
    "DeleteOutcome",
    "Entry",
    "GalleryCache",
    "GalleryClientError",
    "GalleryEntryNotFoundError",
    "GalleryResolutionError",
    "GalleryResponseError",
    "GalleryServerError",
    "GallerySession",
    "GalleryState",
    "GalleryTransportError",
    "GalleryUnauthorizedError",
    "GalleryValidationError",
    "HttpGallerySource",
    "JsonFileCacheStore",
    "MemoryCacheStore",
    "MutationEngine",
    "MutationState",
    "Page",
    "PaginationSource",
    "PendingDeletion",
    "RefreshTimer",
    "ResourceRef",
    "SentinelObserver",
    "SyncEngine",
    "TriggerKind",
    "TriggerQueue",
    "get_client_settings",
    "normalize_page",
]
