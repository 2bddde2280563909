"""
GitHabit.

Tracks a single GitHub handle, persists it across restarts and refreshes the
matching profile and repository list on demand.

Usage:
    from githabit import GitHabitApp
"""

from .app import GitHabitApp

__version__ = "1.0.0"

__all__ = ["GitHabitApp", "__version__"]
