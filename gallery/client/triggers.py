from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from enum import Enum

from .sync import SyncEngine

logger = logging.getLogger(__name__)


class TriggerKind(str, Enum):
    LOAD_MORE = "load_more"
    REFRESH = "refresh"


class TriggerQueue:
    """Feeds viewport and timer events into the sync engine.

    Each event runs as its own task, so a slow refresh never delays a
    load-more; overlapping calls are absorbed by the engine's loading guards.
    """

    def __init__(self, engine: SyncEngine):
        self.engine = engine
        self._queue: asyncio.Queue[TriggerKind] = asyncio.Queue()
        self._dispatcher: asyncio.Task[None] | None = None
        self._running: set[asyncio.Task[None]] = set()

    @property
    def is_running(self) -> bool:
        return self._dispatcher is not None and not self._dispatcher.done()

    def push(self, kind: TriggerKind) -> None:
        self._queue.put_nowait(kind)

    def start(self) -> None:
        if self.is_running:
            return
        self._dispatcher = asyncio.create_task(self._dispatch_loop())

    async def stop(self) -> None:
        if self._dispatcher is not None:
            self._dispatcher.cancel()
            with suppress(asyncio.CancelledError):
                await self._dispatcher
            self._dispatcher = None
        if self._running:
            await asyncio.gather(*list(self._running), return_exceptions=True)

    async def drain(self) -> None:
        """Wait until every queued event has been dispatched and has finished."""
        await self._queue.join()
        while self._running:
            await asyncio.gather(*list(self._running), return_exceptions=True)

    async def _dispatch_loop(self) -> None:
        while True:
            kind = await self._queue.get()
            try:
                task = asyncio.create_task(self._run(kind))
                self._running.add(task)
                task.add_done_callback(self._running.discard)
            finally:
                self._queue.task_done()

    async def _run(self, kind: TriggerKind) -> None:
        try:
            if kind is TriggerKind.LOAD_MORE:
                await self.engine.load_more()
            else:
                await self.engine.load(force_list_refresh=True)
        except Exception:
            # Triggers are best-effort; the next event retries naturally.
            logger.warning("Trigger %s failed.", kind.value, exc_info=True)


class RefreshTimer:
    """Pushes a background refresh every ``interval_seconds`` until stopped."""

    def __init__(self, triggers: TriggerQueue, *, interval_seconds: float):
        self.triggers = triggers
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task[None] | None = None

    def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _loop(self) -> None:
        interval = max(0.01, self.interval_seconds)
        while True:
            await asyncio.sleep(interval)
            self.triggers.push(TriggerKind.REFRESH)


class SentinelObserver:
    """Viewport-proximity check for the sentinel rendered after the last entry."""

    def __init__(self, triggers: TriggerQueue, *, margin: float):
        self.triggers = triggers
        self.margin = margin

    def observe(self, distance_to_viewport: float) -> bool:
        if distance_to_viewport > self.margin:
            return False
        self.triggers.push(TriggerKind.LOAD_MORE)
        return True
