"""
Tests for the async GitHub REST client.

Tests:
- Request shape (headers, parameters, path encoding)
- Outcome classification
"""

import asyncio

import httpx

from githabit.api import GitHubClient
from githabit.models import SchemaMismatch, Success, TransportError


class TestRequests:
    """Tests for what the client sends."""

    def test_profile_headers_without_token(self, fake_github, profile_payload):
        fake_github.json("/users/octocat", profile_payload)

        async def run():
            async with fake_github.client() as client:
                return await client.fetch_profile("octocat")

        asyncio.run(run())

        request = fake_github.requests[0]
        assert request.method == "GET"
        assert request.headers["Accept"] == "application/vnd.github.v3+json"
        assert "Authorization" not in request.headers

    def test_profile_bearer_token(self, fake_github, profile_payload):
        fake_github.json("/users/octocat", profile_payload)

        async def run():
            async with fake_github.client() as client:
                return await client.fetch_profile("octocat", token="ghp_secret")

        asyncio.run(run())

        assert fake_github.requests[0].headers["Authorization"] == "Bearer ghp_secret"

    def test_repositories_params(self, fake_github, repos_payload):
        """Test repositories are requested newest first, one page of 100."""
        fake_github.json("/users/octocat/repos", repos_payload)

        async def run():
            async with fake_github.client() as client:
                return await client.fetch_repositories("octocat")

        asyncio.run(run())

        params = fake_github.requests[0].url.params
        assert params["sort"] == "updated"
        assert params["per_page"] == "100"
        assert fake_github.requests[0].headers["Accept"] == "application/vnd.github.v3+json"

    def test_handle_is_single_path_segment(self, fake_github):
        async def run():
            async with fake_github.client() as client:
                return await client.fetch_profile("octo/cat")

        asyncio.run(run())

        assert b"/users/octo%2Fcat" in fake_github.requests[0].url.raw_path

    def test_owned_client_closed_on_exit(self):
        async def run():
            client = GitHubClient(api_base="https://api.github.test")
            async with client:
                assert client._client is not None
            return client

        client = asyncio.run(run())

        assert client._client is None


class TestClassification:
    """Tests for FetchOutcome classification."""

    def _profile(self, fake_github, handle="octocat"):
        async def run():
            async with fake_github.client() as client:
                return await client.fetch_profile(handle)

        return asyncio.run(run())

    def _repositories(self, fake_github, handle="octocat"):
        async def run():
            async with fake_github.client() as client:
                return await client.fetch_repositories(handle)

        return asyncio.run(run())

    def test_profile_success(self, fake_github, profile_payload):
        fake_github.json("/users/octocat", profile_payload)

        outcome = self._profile(fake_github)

        assert isinstance(outcome, Success)
        assert outcome.value.login == "octocat"

    def test_repositories_success(self, fake_github, repos_payload):
        fake_github.json("/users/octocat/repos", repos_payload)

        outcome = self._repositories(fake_github)

        assert isinstance(outcome, Success)
        assert [repo.id for repo in outcome.value] == [1, 2, 3]

    def test_empty_repositories_success(self, fake_github):
        fake_github.json("/users/octocat/repos", [])

        outcome = self._repositories(fake_github)

        assert outcome == Success([])

    def test_extra_fields_are_not_mismatch(self, fake_github, profile_payload):
        profile_payload["plan"] = {"name": "pro", "space": 976562499}
        fake_github.json("/users/octocat", profile_payload)

        assert isinstance(self._profile(fake_github), Success)

    def test_wrong_shape_is_mismatch(self, fake_github):
        fake_github.json("/users/octocat", {"login": "octocat", "public_repos": "lots"})

        outcome = self._profile(fake_github)

        assert isinstance(outcome, SchemaMismatch)
        assert "avatar_url" in outcome.detail

    def test_repositories_wrong_shape_is_mismatch(self, fake_github, profile_payload):
        fake_github.json("/users/octocat/repos", profile_payload)

        assert isinstance(self._repositories(fake_github), SchemaMismatch)

    def test_non_json_body_is_mismatch(self, fake_github):
        fake_github.route("/users/octocat", lambda request: httpx.Response(200, text="<html>"))

        assert isinstance(self._profile(fake_github), SchemaMismatch)

    def test_unknown_handle_is_mismatch(self, fake_github):
        """Test GitHub's 404 for an unknown login reads as an invalid handle."""
        outcome = self._profile(fake_github, handle="no-such-user-zz")

        assert outcome == SchemaMismatch("Not Found")

    def test_rate_limit_is_transport_error(self, fake_github):
        fake_github.route(
            "/users/octocat",
            lambda request: httpx.Response(
                403,
                json={"message": "API rate limit exceeded for 127.0.0.1."},
                headers={"X-RateLimit-Remaining": "0"},
            ),
        )

        outcome = self._profile(fake_github)

        assert isinstance(outcome, TransportError)
        assert isinstance(outcome.cause, httpx.HTTPStatusError)
        assert "403" in outcome.describe()
        assert "API rate limit exceeded" in outcome.describe()

    def test_server_error_is_transport_error(self, fake_github):
        fake_github.route("/users/octocat/repos", lambda request: httpx.Response(502, text="bad gateway"))

        assert isinstance(self._repositories(fake_github), TransportError)

    def test_timeout_is_transport_error(self, fake_github):
        def timeout(request):
            raise httpx.ReadTimeout("timed out", request=request)

        fake_github.route("/users/octocat", timeout)

        outcome = self._profile(fake_github)

        assert isinstance(outcome, TransportError)
        assert isinstance(outcome.cause, httpx.ReadTimeout)
        assert outcome.describe()

    def test_connection_failure_is_transport_error(self, fake_github):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        fake_github.route("/users/octocat/repos", refuse)

        assert isinstance(self._repositories(fake_github), TransportError)

    def test_no_retry(self, fake_github):
        fake_github.route("/users/octocat", lambda request: httpx.Response(500))

        self._profile(fake_github)

        assert fake_github.count("/users/octocat") == 1
