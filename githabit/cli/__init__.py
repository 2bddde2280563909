"""
Console presentation for GitHabit.

Renders DisplayState as plain text and runs the interactive prompt.
"""

from .console import main, run_console
from .formatters import format_display_state, format_profile, format_repositories

__all__ = ["main", "run_console", "format_display_state", "format_profile", "format_repositories"]
