"""Observable single-key store contract shared by all handle stores."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Callable
from typing import Optional

from ..constants import HANDLE_DEFAULT, HANDLE_KEY
from ..exceptions import StoreError, StoreReadFailure, StoreWriteFailure
from ..logging import store_logger

Listener = Callable[[str], None]


class HandleStore(ABC):
    """
    Async-observable single string slot.

    Subclasses implement ``_load`` and ``_save``; this class handles the
    default value, error wrapping and change notification.

    Usage:
        unsubscribe = store.subscribe(on_change)
        current = await store.read()
        await store.write("octocat")  # on_change("octocat")
    """

    def __init__(self, key: str = HANDLE_KEY, default: str = HANDLE_DEFAULT):
        self.key = key
        self.default = default
        self._listeners: list[Listener] = []

    @abstractmethod
    async def _load(self) -> Optional[str]:
        """Return the stored value, or None when the key was never written."""

    @abstractmethod
    async def _save(self, value: str) -> None:
        """Upsert the value atomically."""

    async def read(self) -> str:
        """Current value, or the default when unset."""
        try:
            value = await self._load()
        except StoreError:
            raise
        except Exception as e:
            store_logger.error("store_read_failed", key=self.key, error=str(e))
            raise StoreReadFailure(f"Could not read '{self.key}': {e}", key=self.key) from e
        return self.default if value is None else value

    async def write(self, value: str) -> None:
        """
        Persist ``value`` and notify subscribers.

        Raises:
            StoreWriteFailure: the value did not reach storage; subscribers
                are not notified.
        """
        try:
            await self._save(value)
        except StoreError:
            raise
        except Exception as e:
            store_logger.error("store_write_failed", key=self.key, error=str(e))
            raise StoreWriteFailure(f"Could not write '{self.key}': {e}", key=self.key) from e
        store_logger.debug("store_written", key=self.key)
        self._notify(value)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register for change notifications. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def values(self) -> AsyncIterator[str]:
        """
        Observable stream: the current value, then every subsequent write.

        Subscribes before reading so no write between the two is lost.
        """
        queue: asyncio.Queue[str] = asyncio.Queue()
        unsubscribe = self.subscribe(queue.put_nowait)
        try:
            yield await self.read()
            while True:
                yield await queue.get()
        finally:
            unsubscribe()

    def close(self) -> None:
        """Release resources held by the store."""

    def _notify(self, value: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                # A faulty subscriber must not turn a completed write into a failure
                store_logger.exception("store_listener_failed", key=self.key)
