"""
Fetch cycle orchestration.

A trigger (app start with a known handle, or an explicit confirm) fetches
the profile and the repository list concurrently and reduces each outcome
into the shared DisplayState on its own:

    profile   Success        -> profile, handle_invalid=False, last_error=None
              SchemaMismatch -> no profile, handle_invalid=True,  last_error=None
              TransportError -> no profile, handle_invalid=False, last_error=message
    repos     Success        -> repos
              any failure    -> no repos (no separate flag)

Overlapping triggers are numbered. With ``discard_stale_results`` (the
default) only results from the latest trigger are applied; otherwise results
land in completion order and a slow earlier trigger can overwrite a later one.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any, Optional

from ..api import GitHubClient
from ..logging import LogContext, log_timing
from ..logging import fetch_logger as logger
from ..models import (
    DisplayState,
    FetchOutcome,
    RepositoryList,
    SchemaMismatch,
    Success,
    TransportError,
    UserProfile,
)

StateListener = Callable[[DisplayState], None]


def reduce_profile(outcome: FetchOutcome[UserProfile]) -> dict[str, Any]:
    """DisplayState fields produced by a profile outcome."""
    if isinstance(outcome, Success):
        return {"profile": outcome.value, "handle_invalid": False, "last_error": None}
    if isinstance(outcome, SchemaMismatch):
        return {"profile": None, "handle_invalid": True, "last_error": None}
    return {"profile": None, "handle_invalid": False, "last_error": outcome.describe()}


def reduce_repositories(outcome: FetchOutcome[RepositoryList]) -> dict[str, Any]:
    """DisplayState fields produced by a repository outcome."""
    if isinstance(outcome, Success):
        return {"repos": list(outcome.value)}
    return {"repos": None}


class FetchOrchestrator:
    """
    Runs fetch cycles and publishes the resulting DisplayState.

    Example:
        orchestrator = FetchOrchestrator(client, token=settings.github_token)
        orchestrator.subscribe(render)
        await orchestrator.on_confirm("octocat")
    """

    def __init__(
        self,
        client: GitHubClient,
        token: Optional[str] = None,
        discard_stale_results: bool = True,
    ):
        self.client = client
        self.token = token
        self.discard_stale_results = discard_stale_results
        self.state = DisplayState()
        self._generation = 0
        self._listeners: list[StateListener] = []

    @property
    def latest_generation(self) -> int:
        """Number of the most recently issued trigger."""
        return self._generation

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Receive every applied DisplayState. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Triggers
    # -------------------------------------------------------------------------

    async def on_app_start(self, handle: str) -> Optional[DisplayState]:
        """Fetch at startup, but only for a handle that was already saved."""
        if not handle:
            logger.info("app_start_skipped", reason="no_handle")
            return None
        return await self.trigger(handle, reason="app_start")

    async def on_confirm(self, handle: str) -> Optional[DisplayState]:
        """Fetch after the user confirmed the input."""
        if not handle:
            logger.info("confirm_skipped", reason="no_handle")
            return None
        return await self.trigger(handle, reason="confirm")

    @log_timing("fetch_cycle", logger=logger)  # type: ignore[arg-type]
    async def trigger(self, handle: str, reason: str = "confirm") -> DisplayState:
        """
        Run one fetch cycle for ``handle``.

        Both fetches always run to completion; neither failure blocks the
        other and no failure escapes this call.

        Returns:
            The DisplayState after this cycle's results were applied (or
            discarded as stale).
        """
        self._generation += 1
        generation = self._generation

        with LogContext(trigger=generation, handle=handle, reason=reason):
            logger.info("fetch_cycle_started")
            await asyncio.gather(
                self._refresh_profile(generation, handle),
                self._refresh_repositories(generation, handle),
            )
        return self.state

    async def _refresh_profile(self, generation: int, handle: str) -> None:
        outcome = await self._guarded("profile", lambda: self.client.fetch_profile(handle, self.token))
        self._apply(generation, "profile", reduce_profile(outcome))

    async def _refresh_repositories(self, generation: int, handle: str) -> None:
        outcome = await self._guarded("repositories", lambda: self.client.fetch_repositories(handle))
        self._apply(generation, "repositories", reduce_repositories(outcome))

    async def _guarded(
        self, resource: str, fetch: Callable[[], Awaitable[FetchOutcome[Any]]]
    ) -> FetchOutcome[Any]:
        """Turn anything the client lets escape into a TransportError outcome."""
        try:
            return await fetch()
        except Exception as e:
            logger.exception("fetch_unexpected_error", resource=resource)
            return TransportError(e)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    def _apply(self, generation: int, resource: str, fields: dict[str, Any]) -> None:
        if self.discard_stale_results and generation != self._generation:
            logger.info(
                "stale_result_discarded",
                resource=resource,
                result_generation=generation,
                latest_generation=self._generation,
            )
            return

        self.state = replace(self.state, generation=generation, **fields)
        logger.debug("display_state_applied", resource=resource, result_generation=generation)
        for listener in list(self._listeners):
            try:
                listener(self.state)
            except Exception:
                logger.exception("state_listener_failed")


__all__ = ["FetchOrchestrator", "StateListener", "reduce_profile", "reduce_repositories"]
