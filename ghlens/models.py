#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Data models for the GitHub activity viewer.

Contains the dataclasses, enums, and constants shared by the source,
the list controller, and the TUI. Every model is parsed from the raw API
JSON with a ``from_dict`` classmethod that tolerates missing fields, so a
partially populated record never breaks filtering or rendering.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# =============================================================================
# Constants
# =============================================================================

ALL_CATEGORIES = "All"
GITHUB_WEB_URL = "https://github.com"


# =============================================================================
# Enums
# =============================================================================


class EntityKind(str, Enum):
    """Remote collection being paginated. One controller per kind."""
    ACTIVITY = "activity"
    RECEIVED = "received"
    SUBSCRIPTIONS = "subscriptions"
    GISTS = "gists"


class ErrorKind(str, Enum):
    """Failure recorded in controller state after a fetch fails."""
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"
    RATE_LIMIT = "rate_limit"


# =============================================================================
# Helpers
# =============================================================================


def _str(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def _opt_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


# =============================================================================
# Dataclasses
# =============================================================================


@dataclass
class GitHubUser:
    """Public profile returned by /users/{username}."""

    login: str
    id: int = 0
    avatar_url: str = ""
    html_url: str = ""
    name: Optional[str] = None
    bio: Optional[str] = None
    public_repos: int = 0
    public_gists: int = 0
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GitHubUser":
        login = _str(data.get("login"))
        return cls(
            login=login,
            id=_int(data.get("id")),
            avatar_url=_str(data.get("avatar_url")),
            html_url=_str(data.get("html_url")) or f"{GITHUB_WEB_URL}/{login}",
            name=_opt_str(data.get("name")),
            bio=_opt_str(data.get("bio")),
            public_repos=_int(data.get("public_repos")),
            public_gists=_int(data.get("public_gists")),
            created_at=_str(data.get("created_at")),
            updated_at=_str(data.get("updated_at")),
        )


@dataclass
class GitHubActor:
    """User who triggered an event."""

    login: str
    id: int = 0
    display_login: Optional[str] = None
    avatar_url: str = ""

    @property
    def html_url(self) -> str:
        return f"{GITHUB_WEB_URL}/{self.login}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GitHubActor":
        return cls(
            login=_str(data.get("login")),
            id=_int(data.get("id")),
            display_login=_opt_str(data.get("display_login")),
            avatar_url=_str(data.get("avatar_url")),
        )


@dataclass
class Commit:
    """A commit listed in a PushEvent payload."""

    sha: str
    message: str = ""
    author_name: str = ""
    url: str = ""

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Commit":
        return cls(
            sha=_str(data.get("sha")),
            message=_str(data.get("message")),
            author_name=_str(_dict(data.get("author")).get("name")),
            url=_str(data.get("url")),
        )


@dataclass
class GitHubEvent:
    """One entry of an activity or received-events feed.

    The payload is kept as the raw dict (its shape varies by event type);
    the properties below pull out the few fields the viewer needs.
    """

    id: str
    type: str
    actor: GitHubActor
    repo_name: str = ""
    payload: Dict[str, Any] = field(default_factory=dict)
    public: bool = True
    created_at: str = ""

    @property
    def repo_url(self) -> str:
        return f"{GITHUB_WEB_URL}/{self.repo_name}"

    @property
    def commits(self) -> List[Commit]:
        raw = self.payload.get("commits")
        if not isinstance(raw, list):
            return []
        return [Commit.from_dict(c) for c in raw if isinstance(c, dict)]

    @property
    def ref(self) -> Optional[str]:
        return _opt_str(self.payload.get("ref"))

    @property
    def branch(self) -> Optional[str]:
        ref = self.ref
        if ref is None:
            return None
        return ref[len("refs/heads/"):] if ref.startswith("refs/heads/") else ref

    @property
    def action(self) -> Optional[str]:
        return _opt_str(self.payload.get("action"))

    def payload_url(self, section: str) -> Optional[str]:
        """html_url of a nested payload object (issue, pull_request, ...)."""
        return _opt_str(_dict(self.payload.get(section)).get("html_url"))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GitHubEvent":
        return cls(
            id=str(data.get("id", "")),
            type=_str(data.get("type")),
            actor=GitHubActor.from_dict(_dict(data.get("actor"))),
            repo_name=_str(_dict(data.get("repo")).get("name")),
            payload=_dict(data.get("payload")),
            public=bool(data.get("public", True)),
            created_at=_str(data.get("created_at")),
        )


@dataclass
class GitHubRepo:
    """A repository the user watches."""

    id: int
    name: str
    full_name: str = ""
    html_url: str = ""
    description: Optional[str] = None
    language: Optional[str] = None
    stargazers_count: int = 0
    watchers_count: int = 0
    forks_count: int = 0
    size: int = 0
    archived: bool = False
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GitHubRepo":
        name = _str(data.get("name"))
        full_name = _str(data.get("full_name")) or name
        return cls(
            id=_int(data.get("id")),
            name=name,
            full_name=full_name,
            html_url=_str(data.get("html_url")) or f"{GITHUB_WEB_URL}/{full_name}",
            description=_opt_str(data.get("description")),
            language=_opt_str(data.get("language")),
            stargazers_count=_int(data.get("stargazers_count")),
            watchers_count=_int(data.get("watchers_count")),
            forks_count=_int(data.get("forks_count")),
            size=_int(data.get("size")),
            archived=bool(data.get("archived", False)),
            updated_at=_str(data.get("updated_at")),
        )


@dataclass
class GistFile:
    filename: str
    language: Optional[str] = None
    size: int = 0
    raw_url: str = ""


@dataclass
class GitHubGist:
    """A public gist. Files keep the API's insertion order."""

    id: str
    html_url: str = ""
    description: Optional[str] = None
    files: List[GistFile] = field(default_factory=list)
    comments: int = 0
    created_at: str = ""
    updated_at: str = ""

    @property
    def filenames(self) -> List[str]:
        return [f.filename for f in self.files]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GitHubGist":
        files = []
        for key, meta in _dict(data.get("files")).items():
            meta = _dict(meta)
            files.append(GistFile(
                filename=_str(meta.get("filename")) or str(key),
                language=_opt_str(meta.get("language")),
                size=_int(meta.get("size")),
                raw_url=_str(meta.get("raw_url")),
            ))
        return cls(
            id=str(data.get("id", "")),
            html_url=_str(data.get("html_url")),
            description=_opt_str(data.get("description")),
            files=files,
            comments=_int(data.get("comments")),
            created_at=_str(data.get("created_at")),
            updated_at=_str(data.get("updated_at")),
        )
