from __future__ import annotations

import copy
import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from .schemas import EntryPayload
from .types import Entry

logger = logging.getLogger(__name__)

LIST_CACHE_KEY = "gallery_list_cache"
IMAGE_CACHE_KEY = "gallery_image_cache"


class CacheStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def clear(self, key: str | None = None) -> None: ...


class MemoryCacheStore:
    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(initial or {})

    def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def clear(self, key: str | None = None) -> None:
        if key is None:
            self._data.clear()
        else:
            self._data.pop(key, None)


class JsonFileCacheStore:
    """Durable key/value store kept in one JSON document.

    The contents are always rebuildable, so an unreadable file is logged and
    treated as empty rather than raised.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data
        data: dict[str, Any] = {}
        if self.path.exists():
            try:
                loaded = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError):
                logger.warning("Ignoring unreadable cache file %s", self.path, exc_info=True)
            else:
                if isinstance(loaded, dict):
                    data = loaded
        self._data = data
        return data

    def _flush(self) -> None:
        data = self._load()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._load().get(key))

    def set(self, key: str, value: Any) -> None:
        self._load()[key] = copy.deepcopy(value)
        self._flush()

    def clear(self, key: str | None = None) -> None:
        data = self._load()
        if key is None:
            data.clear()
        else:
            data.pop(key, None)
        self._flush()


class GalleryCache:
    """The two permanent client caches: top-page snapshot and file-reference URLs."""

    def __init__(self, store: CacheStore, *, snapshot_size: int):
        self.store = store
        self.snapshot_size = snapshot_size

    def load_list_snapshot(self) -> list[Entry]:
        raw = self.store.get(LIST_CACHE_KEY)
        if not isinstance(raw, list):
            return []
        entries: list[Entry] = []
        for item in raw:
            try:
                entries.append(EntryPayload.model_validate(item).to_entry())
            except ValidationError:
                logger.debug("Skipping malformed cached entry: %r", item)
        return entries

    def save_list_snapshot(self, entries: Iterable[Entry]) -> None:
        payload = [
            EntryPayload.from_entry(entry).model_dump(mode="json")
            for entry in list(entries)[: self.snapshot_size]
        ]
        self.store.set(LIST_CACHE_KEY, payload)

    def drop_list_entry(self, entry_id: str) -> None:
        raw = self.store.get(LIST_CACHE_KEY)
        if not isinstance(raw, list):
            return
        kept = [item for item in raw if not (isinstance(item, dict) and str(item.get("id")) == entry_id)]
        if len(kept) != len(raw):
            self.store.set(LIST_CACHE_KEY, kept)

    def image_urls(self) -> dict[str, str]:
        raw = self.store.get(IMAGE_CACHE_KEY)
        if not isinstance(raw, dict):
            return {}
        return {str(key): value for key, value in raw.items() if isinstance(value, str)}

    def get_image_url(self, file_id: str | None) -> str | None:
        if not file_id:
            return None
        return self.image_urls().get(file_id)

    def set_image_url(self, file_id: str, url: str) -> None:
        urls = self.image_urls()
        urls[file_id] = url
        self.store.set(IMAGE_CACHE_KEY, urls)

    def drop_image(self, file_id: str | None) -> None:
        if not file_id:
            return
        urls = self.image_urls()
        if urls.pop(file_id, None) is not None:
            self.store.set(IMAGE_CACHE_KEY, urls)

    def clear_images(self) -> None:
        self.store.clear(IMAGE_CACHE_KEY)

    def clear(self) -> None:
        self.store.clear(LIST_CACHE_KEY)
        self.store.clear(IMAGE_CACHE_KEY)
