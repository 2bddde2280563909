"""Display-ready state produced by the fetch orchestrator."""

from dataclasses import dataclass
from typing import Optional

from ..constants import NEVER_ACTIVE_LABEL
from .github import RepositoryList, UserProfile


def last_activity_label(repos: Optional[RepositoryList]) -> Optional[str]:
    """
    Derive the "last activity" label from a repository list.

    Returns:
        Date of the most recently updated repository, ``"NEVER"`` for an
        empty list, or None when repository data is unavailable.
    """
    if repos is None:
        return None
    if not repos:
        return NEVER_ACTIVE_LABEL
    return repos[0].last_updated_date


@dataclass(frozen=True)
class DisplayState:
    """
    Non-persisted view of the latest fetch cycle.

    ``generation`` is the trigger that last wrote any field; 0 means no
    trigger has completed yet.
    """
    profile: Optional[UserProfile] = None
    repos: Optional[RepositoryList] = None
    handle_invalid: bool = False
    last_error: Optional[str] = None
    generation: int = 0

    @property
    def last_activity(self) -> Optional[str]:
        return last_activity_label(self.repos)


__all__ = ["DisplayState", "last_activity_label"]
