"""Exception hierarchy for GitHabit.

Remote fetch failures are never raised to callers; they are returned as
``SchemaMismatch`` / ``TransportError`` outcomes (see ``githabit.models``).
"""


class GitHabitError(Exception):
    """Base class for all GitHabit errors."""

    pass


class StoreError(GitHabitError):
    """Raised when the handle store cannot be accessed."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class StoreReadFailure(StoreError):
    """Raised when the persisted handle cannot be read."""

    pass


class StoreWriteFailure(StoreError):
    """Raised when a handle write does not reach durable storage."""

    pass


__all__ = ["GitHabitError", "StoreError", "StoreReadFailure", "StoreWriteFailure"]
