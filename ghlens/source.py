# SPDX-License-Identifier: MIT
"""
Remote collection source backed by the public GitHub REST API.

One async client serves every entity kind. ``fetch`` returns parsed items
for a single page; an empty list means the collection is exhausted.
Failures are raised as SourceError subclasses so callers never have to
know about httpx.
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

import httpx

from ghlens.config import ViewerConfig, load_config
from ghlens.debug_logger import get_logger
from ghlens.models import EntityKind, GitHubEvent, GitHubGist, GitHubRepo, GitHubUser


class SourceError(Exception):
    """Base class for failures raised by a collection source."""


class NotFoundError(SourceError):
    """The requested user (or collection) does not exist."""


class TransportError(SourceError):
    """Network failure, server error, or an unreadable response."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(SourceError):
    """The API refused the request because the rate limit is spent."""

    def __init__(self, message: str, reset_at: Optional[datetime] = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class CollectionSource(Protocol):
    """What the list controller needs from a source."""

    async def fetch(self, kind: EntityKind, subject: str, page: int) -> List[Any]:
        ...


# kind -> (path template, item parser)
ENDPOINTS: Dict[EntityKind, tuple] = {
    EntityKind.ACTIVITY: ("/users/{subject}/events/public", GitHubEvent.from_dict),
    EntityKind.RECEIVED: ("/users/{subject}/received_events", GitHubEvent.from_dict),
    EntityKind.SUBSCRIPTIONS: ("/users/{subject}/subscriptions", GitHubRepo.from_dict),
    EntityKind.GISTS: ("/users/{subject}/gists", GitHubGist.from_dict),
}


def _parse_reset(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def _raise_for_status(response: httpx.Response) -> None:
    """Map an error response onto the SourceError hierarchy."""
    status = response.status_code
    if status < 400:
        return
    if status == 404:
        raise NotFoundError(f"Not found: {response.request.url.path}")
    if status in (403, 429):
        reset_at = _parse_reset(response.headers.get("x-ratelimit-reset"))
        raise RateLimitError(f"API rate limit exceeded (HTTP {status})", reset_at=reset_at)
    raise TransportError(f"Unexpected HTTP {status}", status_code=status)


class GitHubSource:
    """Async client for the user-activity endpoints.

    Usable as an async context manager; the underlying httpx client is
    created lazily so constructing a source never touches the network.
    """

    def __init__(
        self,
        config: Optional[ViewerConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config or load_config()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.api_url,
                headers={
                    "Accept": "application/vnd.github+json",
                    "User-Agent": self.config.user_agent,
                },
                timeout=self.config.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GitHubSource":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        client = self._get_client()
        logger = get_logger()
        started = time.perf_counter()
        try:
            response = await client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.http_request(path, None, (time.perf_counter() - started) * 1000)
            raise TransportError(f"Request failed: {e}") from e

        logger.http_request(str(response.url), response.status_code, (time.perf_counter() - started) * 1000)
        _raise_for_status(response)
        try:
            return response.json()
        except ValueError as e:
            raise TransportError("Response was not valid JSON", status_code=response.status_code) from e

    async def fetch_user(self, username: str) -> GitHubUser:
        """Look up a user profile.

        Raises:
            NotFoundError: No such user.
            RateLimitError, TransportError: The lookup itself failed.
        """
        started = time.perf_counter()
        try:
            data = await self._get_json(f"/users/{username}")
        except NotFoundError:
            get_logger().user_lookup(username, False, (time.perf_counter() - started) * 1000)
            raise
        if not isinstance(data, dict):
            raise TransportError("Unexpected user payload")
        get_logger().user_lookup(username, True, (time.perf_counter() - started) * 1000)
        return GitHubUser.from_dict(data)

    async def fetch(self, kind: EntityKind, subject: str, page: int) -> List[Any]:
        """Fetch one page of a user's collection. Empty list = no more pages."""
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        path_template, parse = ENDPOINTS[kind]
        data = await self._get_json(
            path_template.format(subject=subject),
            params={"page": page, "per_page": self.config.per_page},
        )
        if not isinstance(data, list):
            raise TransportError(f"Expected a list from {kind.value} endpoint")
        return [parse(entry) for entry in data if isinstance(entry, dict)]

