from __future__ import annotations

import logging
from collections.abc import Iterable

from .cache import GalleryCache
from .errors import GalleryClientError
from .source import PaginationSource
from .state import GalleryState
from .types import BatchReport, DeleteOutcome, Entry, MutationState, PendingDeletion

logger = logging.getLogger(__name__)


class MutationEngine:
    """Optimistic deletes against ``state.entries``.

    An entry is hidden and its id parked in ``state.pending_deletions`` before
    the request goes out. A confirmed delete purges it from both caches; any
    failure puts it back at ``min(original_index, len(entries))``.
    """

    def __init__(self, state: GalleryState, source: PaginationSource, cache: GalleryCache):
        self.state = state
        self.source = source
        self.cache = cache

    async def delete_one(self, entry: Entry) -> DeleteOutcome:
        if entry.id in self.state.pending_deletions:
            raise ValueError(f"Entry {entry.id} is already being deleted.")
        operation = PendingDeletion(entry=entry, original_index=self.state.index_of(entry.id))
        self._hide([operation])
        return await self._commit(operation)

    async def delete_batch(self, entries: Iterable[Entry]) -> BatchReport:
        """Hide every target up front, then delete them one request at a time."""
        targets: dict[str, Entry] = {}
        for entry in entries:
            if entry.id in self.state.pending_deletions or entry.id in targets:
                continue
            targets[entry.id] = entry

        operations = [
            PendingDeletion(entry=entry, original_index=self.state.index_of(entry.id))
            for entry in targets.values()
        ]
        # Visible entries in list order, then anything no longer on screen.
        operations.sort(
            key=lambda op: (op.original_index is None, op.original_index or 0)
        )
        self._hide(operations)

        outcomes: list[DeleteOutcome] = []
        for position, operation in enumerate(operations):
            outcome = await self._commit(operation)
            outcomes.append(outcome)
            if operation.state is MutationState.CONFIRMED and operation.original_index is not None:
                for later in operations[position + 1 :]:
                    if later.original_index is not None and later.original_index > operation.original_index:
                        later.original_index -= 1

        report = BatchReport(outcomes=tuple(outcomes))
        logger.info("Batch delete finished: %d succeeded, %d failed", report.succeeded, report.failed)
        return report

    async def delete_selected(self) -> BatchReport:
        return await self.delete_batch(self.state.selected_entries())

    def _hide(self, operations: list[PendingDeletion]) -> None:
        hidden_ids = {operation.entry.id for operation in operations}
        for operation in operations:
            # A hidden entry restarts resolution if it ever comes back.
            operation.entry = operation.entry.with_display_url(operation.entry.display_url)
        self.state.pending_deletions |= hidden_ids
        self.state.entries = [entry for entry in self.state.entries if entry.id not in hidden_ids]
        self.state.resync_selection()

    async def _commit(self, operation: PendingDeletion) -> DeleteOutcome:
        entry_id = operation.entry.id
        try:
            await self.source.delete_entry(entry_id)
        except GalleryClientError as exc:
            self._roll_back(operation, exc)
            self.state.record_error(exc)
            logger.warning("Delete of %s failed, restored entry: %s", entry_id, exc)
            return operation.outcome()
        except BaseException:
            self._roll_back(operation, None)
            raise
        self._confirm(operation)
        return operation.outcome()

    def _confirm(self, operation: PendingDeletion) -> None:
        entry = operation.entry
        self.cache.drop_list_entry(entry.id)
        self.cache.drop_image(entry.file_id)
        # Responses already in flight may still carry the entry.
        self.state.deleted_ids.add(entry.id)
        self.state.pending_deletions.discard(entry.id)
        operation.confirm()

    def _roll_back(self, operation: PendingDeletion, error: GalleryClientError | None) -> None:
        entry = operation.entry
        self.state.pending_deletions.discard(entry.id)
        if operation.original_index is not None and self.state.index_of(entry.id) is None:
            index = min(operation.original_index, len(self.state.entries))
            entries = list(self.state.entries)
            entries.insert(index, entry)
            self.state.entries = entries
        self.state.resync_selection()
        operation.roll_back(error)
