"""
GitHub REST payload schemas.

Only the fields GitHabit displays are declared; GitHub sends many more and
those are ignored rather than rejected.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from ..constants import GITHUB_WEB_BASE


class GitHubModel(BaseModel):
    """Base for GitHub payloads: wire names via aliases, extra keys ignored."""
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )


class UserProfile(GitHubModel):
    """Profile summary from ``GET /users/{handle}``."""
    login: str
    avatar_url: str
    bio: Optional[str] = None
    public_repo_count: int = Field(alias="public_repos", ge=0)

    @property
    def profile_url(self) -> str:
        return f"{GITHUB_WEB_BASE}/{self.login}"


class Repository(GitHubModel):
    """One entry of ``GET /users/{handle}/repos``."""
    id: int
    name: str
    full_name: str
    description: Optional[str] = None
    page_url: str = Field(alias="html_url")

    # Repository stats
    star_count: int = Field(alias="stargazers_count", ge=0)
    fork_count: int = Field(alias="forks_count", ge=0)
    watcher_count: int = Field(alias="watchers_count", ge=0)

    primary_language: Optional[str] = Field(default=None, alias="language")
    is_private: bool = Field(alias="private")

    # ISO-8601, kept as sent so the date portion can be shown verbatim
    last_updated_at: str = Field(alias="updated_at")

    @property
    def last_updated_date(self) -> str:
        """Date portion of ``last_updated_at`` (everything before ``T``)."""
        return self.last_updated_at.split("T", 1)[0]


RepositoryList = List[Repository]

_repository_list_adapter = TypeAdapter(RepositoryList)


def parse_profile(payload: Any) -> UserProfile:
    """Validate a decoded profile payload. Raises pydantic.ValidationError."""
    return UserProfile.model_validate(payload)


def parse_repositories(payload: Any) -> RepositoryList:
    """Validate a decoded repository list payload. Raises pydantic.ValidationError."""
    return _repository_list_adapter.validate_python(payload)


__all__ = [
    "UserProfile",
    "Repository",
    "RepositoryList",
    "parse_profile",
    "parse_repositories",
]
