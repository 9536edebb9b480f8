from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import replace

from .cache import GalleryCache
from .errors import GalleryClientError
from .source import PaginationSource
from .state import GalleryState
from .types import Entry, ResourceRef

logger = logging.getLogger(__name__)


class SyncEngine:
    """Keeps ``state.entries`` in step with the paginated feed and the local caches.

    Every merge drops ids in ``state.pending_deletions`` and de-duplicates by id,
    so ``load`` and ``load_more`` may interleave freely with deletions. Both
    entry points return ``False`` without side effects when a load is already
    in flight.
    """

    def __init__(
        self,
        state: GalleryState,
        source: PaginationSource,
        cache: GalleryCache,
        *,
        page_size: int = 60,
        resolve_images: bool = True,
    ):
        self.state = state
        self.source = source
        self.cache = cache
        self.page_size = page_size
        self.resolve_images = resolve_images
        self._resolving: dict[str, asyncio.Task[None]] = {}

    def prime_from_cache(self) -> bool:
        """Paint the cached top page, if any. Returns whether anything was painted."""
        snapshot = self.state.visible(self.cache.load_list_snapshot())
        if not snapshot:
            return False
        self.state.entries = self._attach_known_urls(snapshot, previous=())
        self.state.resync_selection()
        return True

    async def load(
        self,
        *,
        force_image_refresh: bool = False,
        force_list_refresh: bool = False,
    ) -> bool:
        state = self.state
        if state.is_loading_initial:
            logger.debug("Skipping load: a first-page fetch is already in flight.")
            return False

        if force_image_refresh:
            self._invalidate_images()
        if not force_list_refresh:
            self.prime_from_cache()

        state.is_loading_initial = True
        try:
            page = await self.source.fetch_page(None, self.page_size)
        except GalleryClientError as exc:
            self._record_failure("load", exc)
            return False
        finally:
            state.is_loading_initial = False

        server_visible = state.visible(page.items)
        previous = state.entries
        if not force_list_refresh or not previous:
            merged = server_visible
            state.cursor = page.next_cursor
            state.has_more = page.has_more
        else:
            # Background refresh: fresh top page first, already-scrolled pages kept as tail.
            fresh_ids = {entry.id for entry in server_visible}
            tail = [entry for entry in previous if entry.id not in fresh_ids]
            merged = server_visible + state.visible(tail)
            if state.cursor is None:
                state.cursor = page.next_cursor
                state.has_more = page.has_more

        state.entries = self._attach_known_urls(merged, previous=previous)
        state.resync_selection()
        state.clear_error()
        self.cache.save_list_snapshot(server_visible)
        logger.debug(
            "Merged first page: %d fetched, %d visible, cursor=%s",
            len(page.items),
            len(state.entries),
            state.cursor,
        )
        self.schedule_resolution()
        return True

    async def load_more(self) -> bool:
        state = self.state
        if state.is_loading_more or state.is_loading_initial:
            return False
        if not state.has_more or not state.cursor:
            return False

        cursor = state.cursor
        state.is_loading_more = True
        try:
            page = await self.source.fetch_page(cursor, self.page_size)
        except GalleryClientError as exc:
            self._record_failure("load_more", exc)
            return False
        finally:
            state.is_loading_more = False

        if state.cursor != cursor:
            logger.debug("Discarding page for cursor %s; list moved to %s.", cursor, state.cursor)
            return False

        present = set(state.ids)
        appended: list[Entry] = []
        for entry in state.visible(page.items):
            if entry.id in present:
                continue
            present.add(entry.id)
            appended.append(entry)

        state.entries = state.entries + self._attach_known_urls(appended, previous=())
        state.cursor = page.next_cursor
        state.has_more = page.has_more
        state.resync_selection()
        state.clear_error()
        self.schedule_resolution()
        return True

    def schedule_resolution(self) -> None:
        """Start a background resolution for every entry that still lacks a URL."""
        if not self.resolve_images:
            return
        cached: dict[str, str] = {}
        to_start: dict[str, ResourceRef] = {}
        for entry in self.state.entries:
            file_id = entry.file_id
            if not file_id or entry.display_url or file_id in self._resolving:
                continue
            cached_url = self.cache.get_image_url(file_id)
            if cached_url:
                cached[file_id] = cached_url
            else:
                to_start.setdefault(file_id, entry.resource_ref)
        if not cached and not to_start:
            return

        updated: list[Entry] = []
        for entry in self.state.entries:
            if entry.file_id in cached:
                entry = entry.with_display_url(cached[entry.file_id])
            elif entry.file_id in to_start:
                entry = entry.resolving()
            updated.append(entry)
        self.state.entries = updated

        for file_id, ref in to_start.items():
            task = asyncio.create_task(self._resolve(ref))
            self._resolving[file_id] = task
            task.add_done_callback(lambda _task, key=file_id: self._resolving.pop(key, None))

    async def wait_for_resolutions(self) -> None:
        while self._resolving:
            await asyncio.gather(*list(self._resolving.values()), return_exceptions=True)

    async def aclose(self) -> None:
        tasks = list(self._resolving.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._resolving.clear()

    async def _resolve(self, ref: ResourceRef) -> None:
        file_id = ref.file_id or ""
        try:
            url = await self.source.resolve_display_url(ref)
        except GalleryClientError as exc:
            logger.warning("Could not resolve image for %s: %s", file_id, exc)
            self._apply_resolution(file_id, None)
            return
        self.cache.set_image_url(file_id, url)
        self._apply_resolution(file_id, url)

    def _apply_resolution(self, file_id: str, url: str | None) -> None:
        self.state.entries = [
            entry.with_display_url(url or entry.display_url) if entry.file_id == file_id else entry
            for entry in self.state.entries
        ]

    def _attach_known_urls(self, entries: Iterable[Entry], *, previous: Iterable[Entry]) -> list[Entry]:
        known = {entry.id: entry for entry in previous}
        output: list[Entry] = []
        for entry in entries:
            prior = known.get(entry.id)
            if prior is not None and prior.file_id == entry.file_id and (prior.display_url or prior.is_resolving):
                output.append(replace(entry, display_url=prior.display_url, is_resolving=prior.is_resolving))
                continue
            cached_url = self.cache.get_image_url(entry.file_id)
            output.append(entry.with_display_url(cached_url) if cached_url else entry)
        return output

    def _invalidate_images(self) -> None:
        self.cache.clear_images()
        self.state.entries = [
            entry if entry.is_resolving else entry.with_display_url(None) for entry in self.state.entries
        ]

    def _record_failure(self, operation: str, exc: GalleryClientError) -> None:
        self.state.record_error(exc)
        logger.warning("Gallery %s failed: %s", operation, exc)
