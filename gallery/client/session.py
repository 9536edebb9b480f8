from __future__ import annotations

import logging

import httpx

from .cache import CacheStore, GalleryCache, JsonFileCacheStore
from .config import ClientSettings
from .mutations import MutationEngine
from .source import HttpGallerySource, PaginationSource
from .state import GalleryState
from .sync import SyncEngine
from .triggers import RefreshTimer, SentinelObserver, TriggerQueue

logger = logging.getLogger(__name__)


class GallerySession:
    """Wires state, caches, engines and triggers for one gallery view."""

    def __init__(
        self,
        source: PaginationSource,
        store: CacheStore,
        *,
        page_size: int = 60,
        refresh_interval_seconds: float = 30.0,
        sentinel_margin: float = 400.0,
        resolve_images: bool = True,
    ):
        self.state = GalleryState()
        self.source = source
        self.cache = GalleryCache(store, snapshot_size=page_size)
        self.sync = SyncEngine(
            self.state,
            source,
            self.cache,
            page_size=page_size,
            resolve_images=resolve_images,
        )
        self.mutations = MutationEngine(self.state, source, self.cache)
        self.triggers = TriggerQueue(self.sync)
        self.timer = RefreshTimer(self.triggers, interval_seconds=refresh_interval_seconds)
        self.sentinel = SentinelObserver(self.triggers, margin=sentinel_margin)

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        client: httpx.AsyncClient,
        *,
        source: HttpGallerySource | None = None,
    ) -> GallerySession:
        return cls(
            source if source is not None else HttpGallerySource(client),
            JsonFileCacheStore(settings.cache_path),
            page_size=settings.page_size,
            refresh_interval_seconds=settings.refresh_interval_seconds,
            sentinel_margin=settings.sentinel_margin,
        )

    async def start(self) -> bool:
        """Paint the cache, fetch the first page, then begin periodic refresh."""
        self.triggers.start()
        loaded = await self.sync.load()
        self.timer.start()
        return loaded

    async def aclose(self) -> None:
        await self.timer.stop()
        await self.triggers.stop()
        await self.sync.aclose()
        logger.debug("Gallery session closed with %d entries.", len(self.state.entries))

    async def __aenter__(self) -> GallerySession:
        await self.start()
        return self

    async def __aexit__(self, _exc_type, _exc, _tb) -> None:
        await self.aclose()
