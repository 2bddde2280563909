"""
Pytest fixtures for GitHabit tests.

HTTP is served by httpx.MockTransport; fetch orchestration tests use a
StubClient that returns canned outcomes after configurable delays.
"""

import asyncio
import inspect
from collections.abc import Callable
from typing import Any, Optional

import httpx
import pytest

from githabit.api import GitHubClient
from githabit.config import Settings, get_settings
from githabit.models import SchemaMismatch, Success, TransportError, parse_profile, parse_repositories

API_BASE = "https://api.github.test"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for name in ("GITHUB_TOKEN", "PAT_TOKEN", "GITHUB_API_BASE", "GITHABIT_DEBOUNCE_MS"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Settings with a short quiet period, ignoring any .env file."""
    return Settings(_env_file=None, GITHABIT_DEBOUNCE_MS=50, GITHUB_API_BASE=API_BASE)


@pytest.fixture
def profile_payload():
    """Sample GitHub API user response (with fields GitHabit does not use)."""
    return {
        "login": "octocat",
        "id": 583231,
        "node_id": "MDQ6VXNlcjU4MzIzMQ==",
        "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
        "html_url": "https://github.com/octocat",
        "type": "User",
        "name": "The Octocat",
        "company": "@github",
        "bio": None,
        "public_repos": 8,
        "followers": 17000,
        "created_at": "2011-01-25T18:44:36Z",
    }


def make_repo(
    repo_id: int,
    name: str,
    updated_at: str,
    owner: str = "octocat",
    **overrides: Any,
) -> dict:
    """Build one GitHub API repository entry."""
    repo = {
        "id": repo_id,
        "node_id": f"R_{repo_id}",
        "name": name,
        "full_name": f"{owner}/{name}",
        "private": False,
        "owner": {"login": owner},
        "html_url": f"https://github.com/{owner}/{name}",
        "description": None,
        "fork": False,
        "stargazers_count": 10,
        "watchers_count": 10,
        "forks_count": 2,
        "language": "Python",
        "topics": [],
        "updated_at": updated_at,
        "pushed_at": updated_at,
    }
    repo.update(overrides)
    return repo


@pytest.fixture
def repos_payload():
    """Sample GitHub API repository list, most recently updated first."""
    return [
        make_repo(1, "hello-world", "2024-03-01T10:00:00Z", description="My first repo"),
        make_repo(2, "spoon-knife", "2024-02-11T08:30:00Z", language=None),
        make_repo(3, "linguist", "2023-12-24T23:59:59Z", stargazers_count=4000),
    ]


class FakeGitHub:
    """
    Routes requests to handlers by URL path and records every request.

    Unrouted paths answer like GitHub does for unknown users.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, Callable[[httpx.Request], Any]] = {}

    def route(self, path: str, handler: Callable[[httpx.Request], Any]) -> None:
        self.routes[path] = handler

    def json(self, path: str, payload: Any, status_code: int = 200) -> None:
        self.route(path, lambda request: httpx.Response(status_code, json=payload))

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.path)
        if handler is None:
            return httpx.Response(404, json={"message": "Not Found"})
        result = handler(request)
        if inspect.isawaitable(result):
            result = await result
        return result

    def count(self, path: str) -> int:
        return sum(1 for request in self.requests if request.url.path == path)

    def client(self) -> GitHubClient:
        transport = httpx.MockTransport(self.handle)
        return GitHubClient(api_base=API_BASE, client=httpx.AsyncClient(transport=transport))


@pytest.fixture
def fake_github():
    return FakeGitHub()


class StubClient:
    """Stands in for GitHubClient with preset outcomes per handle."""

    def __init__(self):
        self.profiles: dict[str, Any] = {}
        self.repositories: dict[str, Any] = {}
        self.delays: dict[str, float] = {}
        self.profile_calls: list[tuple[str, Optional[str]]] = []
        self.repository_calls: list[str] = []
        self.closed = False

    def set_success(self, handle: str, profile_payload: dict, repos_payload: list) -> None:
        self.profiles[handle] = Success(parse_profile(profile_payload))
        self.repositories[handle] = Success(parse_repositories(repos_payload))

    async def _respond(self, handle: str, table: dict[str, Any]) -> Any:
        delay = self.delays.get(handle, 0)
        if delay:
            await asyncio.sleep(delay)
        outcome = table.get(handle, SchemaMismatch("Not Found"))
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def fetch_profile(self, handle: str, token: Optional[str] = None):
        self.profile_calls.append((handle, token))
        return await self._respond(handle, self.profiles)

    async def fetch_repositories(self, handle: str):
        self.repository_calls.append(handle)
        return await self._respond(handle, self.repositories)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def stub_client():
    return StubClient()


def timeout_error() -> TransportError:
    request = httpx.Request("GET", f"{API_BASE}/users/octocat")
    return TransportError(httpx.ReadTimeout("", request=request))
