"""
Handle persistence.

A single observable string slot (key ``github_handle``, default ``""``):
- MemoryHandleStore: process-local, for tests and ephemeral sessions
- SqlHandleStore: durable SQLAlchemy-backed store
"""

from .base import HandleStore, Listener
from .memory import MemoryHandleStore
from .sql import Setting, SqlHandleStore

__all__ = ["HandleStore", "Listener", "MemoryHandleStore", "Setting", "SqlHandleStore"]
