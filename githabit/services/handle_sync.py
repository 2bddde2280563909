"""
Debounced reconciliation between the live handle buffer and the store.

The buffer follows every keystroke immediately; the store only receives a
value once it has stayed unchanged for the quiet period. Each edit restarts
the window (debounce, not throttle).

Usage:
    sync = HandleSync(store)
    await sync.attach()          # loads the persisted handle into the buffer
    sync.on_edit("octo\\ncat")   # buffer == "octocat", commit scheduled
    await sync.drain()           # store now holds "octocat"
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..constants import DEBOUNCE_QUIET_PERIOD_MS, HANDLE_DEFAULT, LINE_BREAK_CHARS
from ..exceptions import StoreReadFailure, StoreWriteFailure
from ..logging import sync_logger as logger
from ..store import HandleStore

_LINE_BREAKS = str.maketrans("", "", LINE_BREAK_CHARS)


def strip_line_breaks(text: str) -> str:
    """Remove every line-break character; a handle is always a single line."""
    return text.translate(_LINE_BREAKS)


class SyncState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    WRITE_FAILED = "write_failed"


@dataclass(frozen=True)
class PendingCommit:
    text: str
    deadline: float  # event loop time
    generation: int


class HandleSync:
    """
    Owns the editable handle buffer.

    At most one commit timer exists at a time. Every edit bumps a generation
    counter and the scheduled commit only fires if its generation is still
    current when the quiet period ends. A write that has already started is
    never cancelled by a later edit; that edit schedules its own commit.
    """

    def __init__(
        self,
        store: HandleStore,
        quiet_period: float = DEBOUNCE_QUIET_PERIOD_MS / 1000,
        on_write_error: Optional[Callable[[StoreWriteFailure], None]] = None,
    ):
        self.store = store
        self.quiet_period = quiet_period
        self.on_write_error = on_write_error

        self.buffer: str = HANDLE_DEFAULT
        self.last_persisted_value: str = HANDLE_DEFAULT
        self.last_write_error: Optional[StoreWriteFailure] = None
        self.last_read_error: Optional[StoreReadFailure] = None
        self.loaded = False
        self._closed = False

        self._generation = 0
        self._pending: Optional[PendingCommit] = None
        self._timer: Optional[asyncio.Task] = None
        self._writes: set[asyncio.Task] = set()
        self._unsubscribe: Optional[Callable[[], None]] = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SyncState:
        if self._pending is not None:
            return SyncState.PENDING
        if self.last_write_error is not None:
            return SyncState.WRITE_FAILED
        return SyncState.IDLE

    @property
    def pending(self) -> Optional[PendingCommit]:
        return self._pending

    @property
    def generation(self) -> int:
        return self._generation

    # -------------------------------------------------------------------------
    # Store events
    # -------------------------------------------------------------------------

    async def attach(self) -> str:
        """
        Subscribe to store changes and load the initial value.

        An unreadable store is recorded in ``last_read_error`` and treated as
        holding the default, so the session starts without a saved handle.

        Returns:
            The reconciled buffer after the initial load.
        """
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self.on_store_changed)
        try:
            persisted = await self.store.read()
        except StoreReadFailure as e:
            logger.error("handle_load_failed", error=str(e))
            self.last_read_error = e
            persisted = HANDLE_DEFAULT
        else:
            self.last_read_error = None
        self.on_store_loaded(persisted)
        return self.buffer

    def on_store_loaded(self, persisted_text: str) -> None:
        """
        Apply the store's initial value.

        Typing that started before the store answered wins: the buffer is only
        replaced while it still holds the uninitialized default.
        """
        self.loaded = True
        self.last_persisted_value = persisted_text
        if self.buffer == HANDLE_DEFAULT:
            self.buffer = persisted_text
        else:
            logger.debug("store_load_kept_buffer", buffer=self.buffer)

        if self._pending is not None and self._pending.text == persisted_text:
            self._cancel_pending()

    def on_store_changed(self, value: str) -> None:
        self.last_persisted_value = value

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def on_edit(self, raw_text: str) -> str:
        """
        Apply one edit to the buffer and (re)schedule the commit.

        Synchronous: the buffer is updated before this returns. Must be called
        from a running event loop when the text differs from the store.

        Returns:
            The sanitized text now in the buffer.
        """
        text = strip_line_breaks(raw_text)
        self.buffer = text
        self._generation += 1
        self._cancel_pending()

        if text == self.last_persisted_value:
            return text

        self._schedule(text)
        return text

    def _schedule(self, text: str) -> None:
        loop = asyncio.get_running_loop()
        commit = PendingCommit(
            text=text,
            deadline=loop.time() + self.quiet_period,
            generation=self._generation,
        )
        self._pending = commit
        self._timer = loop.create_task(self._commit_after_quiet_period(commit))

    def _cancel_pending(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None
        self._pending = None

    async def _commit_after_quiet_period(self, commit: PendingCommit) -> None:
        await asyncio.sleep(self.quiet_period)
        if commit.generation != self._generation:
            return

        # Past this point the write belongs to no timer and cannot be superseded
        task = asyncio.current_task()
        if task is not None:
            self._writes.add(task)
        self._timer = None
        try:
            await self._write(commit)
        finally:
            if task is not None:
                self._writes.discard(task)

    async def _write(self, commit: PendingCommit) -> None:
        try:
            await self.store.write(commit.text)
        except StoreWriteFailure as e:
            if commit.generation == self._generation:
                self._pending = None
                self.last_write_error = e
            logger.error("handle_commit_failed", error=str(e))
            if self.on_write_error is not None:
                self.on_write_error(e)
            return

        self.last_persisted_value = commit.text
        if commit.generation == self._generation:
            self._pending = None
            self.last_write_error = None
        logger.info("handle_committed", handle=commit.text)

        # Edits made while this write was in flight may have returned to the
        # value it replaced; on_edit saw no difference then, so commit it now
        if not self._closed and self._pending is None and self.buffer != commit.text:
            logger.debug("handle_recommit", handle=self.buffer, superseded=commit.text)
            self._schedule(self.buffer)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def drain(self) -> None:
        """Wait for the scheduled commit and any in-flight write. Never commits early."""
        while True:
            tasks = {task for task in self._writes if not task.done()}
            if self._timer is not None and not self._timer.done():
                tasks.add(self._timer)
            if not tasks:
                return
            await asyncio.wait(tasks)

    async def close(self) -> None:
        """Drop a pending commit, finish in-flight writes and detach from the store."""
        self._closed = True
        self._cancel_pending()
        if self._writes:
            await asyncio.wait(set(self._writes))
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


__all__ = ["HandleSync", "PendingCommit", "SyncState", "strip_line_breaks"]
