"""
Async GitHub REST client.

Features:
- Async HTTP with httpx
- Typed decoding with pydantic
- Failure classification into FetchOutcome values (never raises)

Every call is an independent round trip: no caching, no retries.
"""

from collections.abc import Callable
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..config import get_settings
from ..constants import (
    GITHUB_MEDIA_TYPE,
    RATE_LIMIT_STATUSES,
    REPOS_PAGE_SIZE,
    REPOS_SORT,
    USER_AGENT,
)
from ..logging import github_logger as logger
from ..models import (
    FetchOutcome,
    RepositoryList,
    SchemaMismatch,
    Success,
    TransportError,
    UserProfile,
    describe_error,
    parse_profile,
    parse_repositories,
)


def _validation_summary(error: ValidationError, limit: int = 3) -> str:
    """Short description of the first few validation problems."""
    parts = []
    for item in error.errors()[:limit]:
        location = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    if error.error_count() > limit:
        parts.append(f"... {error.error_count() - limit} more")
    return "; ".join(parts)


def _api_message(response: httpx.Response) -> Optional[str]:
    """The ``message`` field GitHub puts in error documents, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return None


class GitHubClient:
    """
    Async client for the two read-only resources GitHabit tracks.

    Example:
        async with GitHubClient() as client:
            outcome = await client.fetch_profile("octocat")
            if isinstance(outcome, Success):
                print(outcome.value.login)
    """

    def __init__(
        self,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.api_base = (api_base or settings.github_api_base).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "GitHubClient":
        self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _headers(self, token: Optional[str] = None) -> dict[str, str]:
        headers = {"Accept": GITHUB_MEDIA_TYPE}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _user_url(self, handle: str, *segments: str) -> str:
        # The handle is one path segment even if it contains "/" or "?"
        path = "/".join(("users", quote(handle, safe=""), *segments))
        return f"{self.api_base}/{path}"

    async def fetch_profile(
        self, handle: str, token: Optional[str] = None
    ) -> FetchOutcome[UserProfile]:
        """
        Fetch the profile summary for ``handle``.

        Args:
            handle: GitHub login
            token: Optional credential sent as a bearer token

        Returns:
            Success(UserProfile), SchemaMismatch or TransportError
        """
        return await self._fetch(
            "profile",
            handle,
            self._user_url(handle),
            parse_profile,
            headers=self._headers(token),
        )

    async def fetch_repositories(self, handle: str) -> FetchOutcome[RepositoryList]:
        """
        Fetch up to one page of repositories, most recently updated first.

        Returns:
            Success(list of Repository), SchemaMismatch or TransportError
        """
        return await self._fetch(
            "repositories",
            handle,
            self._user_url(handle, "repos"),
            parse_repositories,
            headers=self._headers(),
            params={"sort": REPOS_SORT, "per_page": REPOS_PAGE_SIZE},
        )

    async def _fetch(
        self,
        resource: str,
        handle: str,
        url: str,
        parse: Callable[[Any], Any],
        headers: dict[str, str],
        params: Optional[dict[str, Any]] = None,
    ) -> FetchOutcome[Any]:
        """Issue one GET and classify the result."""
        log = logger.bind(resource=resource, handle=handle)

        try:
            response = await self._get_client().get(url, headers=headers, params=params)
        except httpx.HTTPError as e:
            log.error("fetch_transport_error", error=describe_error(e))
            return TransportError(e)

        if response.status_code == 404:
            # GitHub's answer for an unknown login: an error document, not a profile
            detail = _api_message(response) or "Not Found"
            log.warning("fetch_schema_mismatch", status=404, detail=detail)
            return SchemaMismatch(detail)

        if not response.is_success:
            message = f"{response.status_code} {response.reason_phrase}"
            api_message = _api_message(response)
            if api_message:
                message = f"{message}: {api_message}"
            error = httpx.HTTPStatusError(message, request=response.request, response=response)
            log.error(
                "fetch_http_error",
                status=response.status_code,
                error=message,
                rate_limited=response.status_code in RATE_LIMIT_STATUSES,
                rate_limit_remaining=response.headers.get("X-RateLimit-Remaining"),
            )
            return TransportError(error)

        try:
            payload = response.json()
        except ValueError as e:
            log.warning("fetch_schema_mismatch", detail="body is not JSON")
            return SchemaMismatch(f"Response body is not JSON: {e}")

        try:
            value = parse(payload)
        except ValidationError as e:
            detail = _validation_summary(e)
            log.warning("fetch_schema_mismatch", detail=detail)
            return SchemaMismatch(detail)

        log.info("fetch_succeeded", status=response.status_code)
        return Success(value)


__all__ = ["GitHubClient"]
