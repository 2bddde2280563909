"""
GitHabit data models.

- GitHub payload schemas (pydantic): UserProfile, Repository
- Fetch outcome taxonomy: Success, SchemaMismatch, TransportError
- DisplayState consumed by the presentation layer
"""

from .github import Repository, RepositoryList, UserProfile, parse_profile, parse_repositories
from .outcome import FetchOutcome, SchemaMismatch, Success, TransportError, describe_error
from .state import DisplayState, last_activity_label

__all__ = [
    "UserProfile",
    "Repository",
    "RepositoryList",
    "parse_profile",
    "parse_repositories",
    "FetchOutcome",
    "Success",
    "SchemaMismatch",
    "TransportError",
    "describe_error",
    "DisplayState",
    "last_activity_label",
]
