"""
Interactive console surface.

Each line typed at the prompt replaces the handle field and is confirmed,
which fetches fresh data. An empty line re-confirms the current handle.
End of input (Ctrl-D) or Ctrl-C leaves; a handle still inside its quiet
period is saved before exit.
"""

import asyncio
from collections.abc import Callable
from typing import Optional

from ..app import GitHabitApp
from ..config import Settings, get_settings
from ..exceptions import StoreWriteFailure
from ..logging import cli_logger as logger
from ..logging import configure_logging
from .formatters import format_display_state

PROMPT = "GitHub handle> "


async def run_console(
    app: GitHabitApp,
    input_func: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
) -> None:
    """Drive ``app`` from line input until EOF."""

    def render() -> None:
        output(format_display_state(app.display_state, app.saved_handle, verbose=True))

    await app.start()
    if app.sync.last_read_error is not None:
        output(f"Could not load saved handle: {app.sync.last_read_error}")
    render()

    while True:
        try:
            line = await asyncio.to_thread(input_func, PROMPT)
        except (EOFError, KeyboardInterrupt):
            break

        if line:
            app.edit(line)
        await app.confirm()
        render()

    await app.sync.drain()
    logger.debug("console_closed", saved_handle=app.saved_handle)


def main(settings: Optional[Settings] = None) -> int:
    """Console entry point."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    def report_write_error(error: StoreWriteFailure) -> None:
        print(f"Could not save handle: {error}")

    async def _run() -> None:
        async with GitHabitApp.from_settings(settings, on_write_error=report_write_error) as app:
            await run_console(app)

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        return 130
    return 0
