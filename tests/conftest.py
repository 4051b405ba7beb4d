"""
Pytest configuration and fixtures for ghlens tests.
"""

import sys
from pathlib import Path

# Ensure project root is in sys.path for 'ghlens' imports when not installed
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import asyncio
from typing import Any, Dict, List, Tuple

import pytest

from ghlens.models import EntityKind, GitHubEvent, GitHubGist, GitHubRepo, GitHubUser
from ghlens.source import NotFoundError


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "tui: marks TUI tests")


@pytest.fixture
def temp_state_dir(tmp_path: Path, monkeypatch) -> Path:
    """Create and return a temporary state directory.

    Sets GHLENS_STATE (and points config/settings at tmp_path too) and
    resets the debug logger so it picks up the new paths.
    """
    state_dir = tmp_path / ".local" / "state" / "ghlens"
    state_dir.mkdir(parents=True)
    config_dir = tmp_path / ".config" / "ghlens"
    config_dir.mkdir(parents=True)
    monkeypatch.setenv("GHLENS_STATE", str(state_dir))
    monkeypatch.setenv("GHLENS_CONFIG", str(config_dir))
    monkeypatch.delenv("GHLENS_SETTINGS", raising=False)
    monkeypatch.delenv("GHLENS_API_URL", raising=False)
    monkeypatch.delenv("GHLENS_DEBUG", raising=False)

    from ghlens.debug_logger import reset_logger
    reset_logger()

    return state_dir


@pytest.fixture(autouse=True)
def isolate_state_dir(temp_state_dir: Path):
    """Autouse fixture that keeps every test away from the real ~/.local/state/ghlens."""
    yield temp_state_dir

    from ghlens.debug_logger import reset_logger
    reset_logger()


# --- Item factories ---


def _event(
    id: str,
    type: str = "PushEvent",
    repo: str = "octocat/hello-world",
    actor: str = "octocat",
    created_at: str = "2024-01-05T10:00:00Z",
    **payload: Any,
) -> GitHubEvent:
    return GitHubEvent.from_dict({
        "id": id,
        "type": type,
        "actor": {"login": actor, "id": 1, "display_login": actor},
        "repo": {"name": repo},
        "payload": payload,
        "public": True,
        "created_at": created_at,
    })


def _repo(id: int, name: str = "hello-world", owner: str = "octocat", **fields: Any) -> GitHubRepo:
    data = {"id": id, "name": name, "full_name": f"{owner}/{name}"}
    data.update(fields)
    return GitHubRepo.from_dict(data)


def _gist(id: str, *filenames: str, description: str = None) -> GitHubGist:
    return GitHubGist.from_dict({
        "id": id,
        "html_url": f"https://gist.github.com/{id}",
        "description": description,
        "files": {name: {"filename": name} for name in filenames},
        "created_at": "2024-01-05T10:00:00Z",
    })


def _user(login: str = "octocat", **fields: Any) -> GitHubUser:
    data = {"login": login, "id": 583231, "name": "The Octocat", "public_repos": 8, "public_gists": 8,
            "created_at": "2011-01-25T18:44:36Z", "updated_at": "2024-01-05T10:00:00Z"}
    data.update(fields)
    return GitHubUser.from_dict(data)


@pytest.fixture
def make_event():
    return _event


@pytest.fixture
def make_repo():
    return _repo


@pytest.fixture
def make_gist():
    return _gist


@pytest.fixture
def make_user():
    return _user


# --- Fake source ---


class FakeSource:
    """In-memory collection source.

    Pages are registered per (kind, subject); pages past the end come back
    empty. ``fail`` queues one-shot exceptions for a page and ``hold``
    blocks a page until the returned event is set.
    """

    def __init__(self) -> None:
        self.pages: Dict[Tuple[EntityKind, str], List[List[Any]]] = {}
        self.users: Dict[str, GitHubUser] = {}
        self.failures: Dict[Tuple[EntityKind, str, int], List[Exception]] = {}
        self.gates: Dict[Tuple[EntityKind, str, int], asyncio.Event] = {}
        self.calls: List[Tuple[EntityKind, str, int]] = []
        self.user_calls: List[str] = []
        self.closed = False

    def set_pages(self, kind: EntityKind, subject: str, *pages: List[Any]) -> None:
        self.pages[(kind, subject)] = [list(p) for p in pages]

    def add_user(self, user: GitHubUser) -> None:
        self.users[user.login] = user

    def fail(self, kind: EntityKind, subject: str, page: int, exc: Exception) -> None:
        self.failures.setdefault((kind, subject, page), []).append(exc)

    def hold(self, kind: EntityKind, subject: str, page: int) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[(kind, subject, page)] = gate
        return gate

    async def fetch(self, kind: EntityKind, subject: str, page: int) -> List[Any]:
        key = (kind, subject, page)
        self.calls.append(key)
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        queued = self.failures.get(key)
        if queued:
            raise queued.pop(0)
        pages = self.pages.get((kind, subject), [])
        if page > len(pages):
            return []
        return list(pages[page - 1])

    async def fetch_user(self, username: str) -> GitHubUser:
        self.user_calls.append(username)
        user = self.users.get(username)
        if user is None:
            raise NotFoundError(f"Not found: /users/{username}")
        return user

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_source() -> FakeSource:
    return FakeSource()
