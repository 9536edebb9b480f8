from __future__ import annotations

import asyncio

import pytest
import pytest_asyncio

from gallery.client import (
    GalleryCache,
    GalleryEntryNotFoundError,
    GalleryState,
    MemoryCacheStore,
    MutationEngine,
    SyncEngine,
)
from gallery.client.types import Entry, Page, ResourceRef


def make_entry(entry_id: int | str, *, file_id: str | None = None, prompt: str | None = None) -> Entry:
    key = str(entry_id)
    return Entry(
        id=key,
        prompt=prompt if prompt is not None else f"prompt {key}",
        resource_ref=ResourceRef(file_id=file_id if file_id is not None else f"file-{key}", chat_id="42"),
    )


class FakeGallerySource:
    """In-memory stand-in for the gallery API with keyset pagination over integer ids."""

    def __init__(self, ids=()):
        self.entries: list[Entry] = [make_entry(entry_id) for entry_id in sorted(ids, reverse=True)]
        self.fetch_calls: list[tuple[str | None, int]] = []
        self.delete_calls: list[str] = []
        self.resolve_calls: list[str] = []
        self.fetch_errors: list[Exception] = []
        self.delete_errors: dict[str, Exception] = {}
        self.resolve_errors: dict[str, Exception] = {}
        self.fetch_gate: asyncio.Event | None = None
        self.capture_before_gate = False
        self.delete_gate: asyncio.Event | None = None

    def add(self, *ids: int) -> None:
        self.entries.extend(make_entry(entry_id) for entry_id in ids)
        self.entries.sort(key=lambda entry: int(entry.id), reverse=True)

    async def fetch_page(self, cursor, limit):
        self.fetch_calls.append((cursor, limit))
        if self.fetch_gate is not None and not self.capture_before_gate:
            await self.fetch_gate.wait()
        if self.fetch_errors:
            raise self.fetch_errors.pop(0)
        candidates = [entry for entry in self.entries if cursor is None or int(entry.id) < int(cursor)]
        window = candidates[: limit + 1]
        has_more = len(window) > limit
        items = window[:limit]
        if self.fetch_gate is not None and self.capture_before_gate:
            await self.fetch_gate.wait()
        return Page(items=items, has_more=has_more, next_cursor=items[-1].id if has_more and items else None)

    async def delete_entry(self, entry_id):
        self.delete_calls.append(entry_id)
        if self.delete_gate is not None:
            await self.delete_gate.wait()
        if entry_id in self.delete_errors:
            raise self.delete_errors[entry_id]
        before = len(self.entries)
        self.entries = [entry for entry in self.entries if entry.id != entry_id]
        if len(self.entries) == before:
            raise GalleryEntryNotFoundError("Not found")

    async def resolve_display_url(self, ref):
        self.resolve_calls.append(ref.file_id)
        if ref.file_id in self.resolve_errors:
            raise self.resolve_errors[ref.file_id]
        return f"https://img.test/{ref.file_id}"


@pytest.fixture
def source() -> FakeGallerySource:
    return FakeGallerySource(range(1, 11))


@pytest.fixture
def cache() -> GalleryCache:
    return GalleryCache(MemoryCacheStore(), snapshot_size=3)


@pytest.fixture
def state() -> GalleryState:
    return GalleryState()


@pytest_asyncio.fixture
async def sync(state, source, cache):
    engine = SyncEngine(state, source, cache, page_size=3)
    yield engine
    await engine.aclose()


@pytest.fixture
def mutations(state, source, cache) -> MutationEngine:
    return MutationEngine(state, source, cache)


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def source_factory():
    return FakeGallerySource
