from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .errors import GalleryClientError, GalleryUnauthorizedError
from .types import Entry


@dataclass
class GalleryState:
    """In-memory view shared by the sync and mutation engines."""

    entries: list[Entry] = field(default_factory=list)
    cursor: str | None = None
    has_more: bool = False
    is_loading_initial: bool = False
    is_loading_more: bool = False
    pending_deletions: set[str] = field(default_factory=set)
    deleted_ids: set[str] = field(default_factory=set)
    selection: set[str] = field(default_factory=set)
    last_error: GalleryClientError | None = None
    needs_reauth: bool = False

    @property
    def ids(self) -> list[str]:
        return [entry.id for entry in self.entries]

    @property
    def is_loading(self) -> bool:
        return self.is_loading_initial or self.is_loading_more

    @property
    def shows_loading_placeholder(self) -> bool:
        return self.is_loading_initial and not self.entries

    def index_of(self, entry_id: str) -> int | None:
        for index, entry in enumerate(self.entries):
            if entry.id == entry_id:
                return index
        return None

    def get(self, entry_id: str) -> Entry | None:
        index = self.index_of(entry_id)
        return None if index is None else self.entries[index]

    def visible(self, entries: Iterable[Entry]) -> list[Entry]:
        hidden = self.pending_deletions | self.deleted_ids
        return [entry for entry in entries if entry.id not in hidden]

    def resync_selection(self) -> None:
        self.selection &= set(self.ids)

    def select(self, entry_id: str) -> bool:
        if self.index_of(entry_id) is None:
            return False
        self.selection.add(entry_id)
        return True

    def deselect(self, entry_id: str) -> None:
        self.selection.discard(entry_id)

    def toggle(self, entry_id: str) -> bool:
        if entry_id in self.selection:
            self.selection.discard(entry_id)
            return False
        return self.select(entry_id)

    def clear_selection(self) -> None:
        self.selection.clear()

    def selected_entries(self) -> list[Entry]:
        return [entry for entry in self.entries if entry.id in self.selection]

    def record_error(self, exc: GalleryClientError) -> None:
        self.last_error = exc
        if isinstance(exc, GalleryUnauthorizedError):
            self.needs_reauth = True

    def clear_error(self) -> None:
        self.last_error = None
        self.needs_reauth = False
