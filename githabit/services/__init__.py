"""
Service layer.

- HandleSync: debounced reconciliation of the handle buffer with the store
- FetchOrchestrator: fetch cycles and DisplayState reduction
"""

from .fetch_orchestrator import FetchOrchestrator, reduce_profile, reduce_repositories
from .handle_sync import HandleSync, PendingCommit, SyncState, strip_line_breaks

__all__ = [
    "FetchOrchestrator",
    "reduce_profile",
    "reduce_repositories",
    "HandleSync",
    "PendingCommit",
    "SyncState",
    "strip_line_breaks",
]
