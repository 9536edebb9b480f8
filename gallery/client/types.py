from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from .errors import GalleryClientError, GalleryEntryNotFoundError


@dataclass(frozen=True)
class ResourceRef:
    file_id: str | None
    chat_id: str | None = None


@dataclass(frozen=True)
class Entry:
    id: str
    prompt: str
    resource_ref: ResourceRef
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime | None = None
    display_url: str | None = None
    is_resolving: bool = False

    @property
    def file_id(self) -> str | None:
        return self.resource_ref.file_id

    def resolving(self) -> Entry:
        return replace(self, is_resolving=True)

    def with_display_url(self, url: str | None) -> Entry:
        return replace(self, display_url=url, is_resolving=False)


@dataclass(frozen=True)
class Page:
    items: list[Entry]
    has_more: bool
    next_cursor: str | None


class MutationState(str, Enum):
    OPTIMISTIC = "optimistic"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"


@dataclass
class PendingDeletion:
    """One optimistic delete: hidden first, then confirmed or rolled back exactly once."""

    entry: Entry
    original_index: int | None
    state: MutationState = MutationState.OPTIMISTIC
    error: GalleryClientError | None = None

    def confirm(self) -> None:
        self._settle(MutationState.CONFIRMED)

    def roll_back(self, error: GalleryClientError | None) -> None:
        self._settle(MutationState.ROLLED_BACK)
        self.error = error

    def _settle(self, target: MutationState) -> None:
        if self.state is not MutationState.OPTIMISTIC:
            raise RuntimeError(
                f"Deletion of {self.entry.id} already {self.state.value}; cannot move to {target.value}."
            )
        self.state = target

    def outcome(self) -> DeleteOutcome:
        return DeleteOutcome(entry_id=self.entry.id, state=self.state, error=self.error)


@dataclass(frozen=True)
class DeleteOutcome:
    entry_id: str
    state: MutationState
    error: GalleryClientError | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is MutationState.CONFIRMED

    @property
    def not_found(self) -> bool:
        return isinstance(self.error, GalleryEntryNotFoundError)


@dataclass(frozen=True)
class BatchReport:
    outcomes: tuple[DeleteOutcome, ...]

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.succeeded

    @property
    def succeeded_ids(self) -> list[str]:
        return [outcome.entry_id for outcome in self.outcomes if outcome.succeeded]
