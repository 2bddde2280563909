"""
Application wiring.

GitHabitApp connects the handle store, the debounced buffer and the fetch
orchestrator, and exposes the three events a presentation layer emits:

- ``start()``: load the saved handle, fetch if there is one
- ``edit(text)``: every change of the input field
- ``confirm()``: the user's "done" action, fetches for the current buffer

Usage:
    async with GitHabitApp.from_settings() as app:
        await app.start()
        app.edit("octocat")
        state = await app.confirm()
"""

from collections.abc import Callable
from typing import Optional

from .api import GitHubClient
from .config import Settings, get_settings
from .exceptions import StoreWriteFailure
from .models import DisplayState
from .services import FetchOrchestrator, HandleSync
from .store import HandleStore, SqlHandleStore


class GitHabitApp:
    """Single-handle tracker: one store, one client, one display state."""

    def __init__(
        self,
        store: HandleStore,
        client: GitHubClient,
        settings: Optional[Settings] = None,
        on_write_error: Optional[Callable[[StoreWriteFailure], None]] = None,
    ):
        self.settings = settings or get_settings()
        self.store = store
        self.client = client
        self.sync = HandleSync(
            store,
            quiet_period=self.settings.debounce_seconds,
            on_write_error=on_write_error,
        )
        self.orchestrator = FetchOrchestrator(
            client,
            token=self.settings.github_token,
            discard_stale_results=self.settings.discard_stale_results,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs) -> "GitHabitApp":
        """Build an app with the durable SQL store and a real HTTP client."""
        settings = settings or get_settings()
        store = SqlHandleStore.from_url(settings.database_url)
        client = GitHubClient(api_base=settings.github_api_base, timeout=settings.request_timeout)
        return cls(store, client, settings=settings, **kwargs)

    async def __aenter__(self) -> "GitHabitApp":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def handle(self) -> str:
        """Live contents of the input field."""
        return self.sync.buffer

    @property
    def saved_handle(self) -> str:
        return self.sync.last_persisted_value

    @property
    def display_state(self) -> DisplayState:
        return self.orchestrator.state

    async def start(self) -> Optional[DisplayState]:
        """Reconcile the buffer with the store, then fetch if a handle is known."""
        handle = await self.sync.attach()
        return await self.orchestrator.on_app_start(handle)

    def edit(self, raw_text: str) -> str:
        return self.sync.on_edit(raw_text)

    async def confirm(self) -> Optional[DisplayState]:
        """
        Fetch for the live buffer.

        The Android app this replaces fetched for the last saved handle, so a
        confirm inside the quiet period showed the previous handle. Here the
        text on screen is what gets fetched; saving still follows the debounce.
        """
        return await self.orchestrator.on_confirm(self.sync.buffer)

    async def close(self) -> None:
        await self.sync.close()
        await self.client.aclose()
        self.store.close()


__all__ = ["GitHabitApp"]
