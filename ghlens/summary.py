# SPDX-License-Identifier: MIT
"""One-shot text summary of a user's profile and one collection (no TUI).

Drives the same PaginatedListController the dashboard uses, so search,
category and pagination behave identically in both modes.
"""
from dataclasses import dataclass
from typing import Any, List, Optional

from ghlens.controller import ListSnapshot, PaginatedListController
from ghlens.filtering import KIND_SPECS, NO_MATCHES_MESSAGE
from ghlens.models import EntityKind, GitHubUser
from ghlens.source import GitHubSource
from ghlens.tui.formatting import (
    LINK_RESOLVERS,
    describe_event,
    format_date,
    format_size,
    gist_title,
    relative_time,
)


def format_user(user: GitHubUser) -> List[str]:
    name = f" ({user.name})" if user.name else ""
    lines = [f"{user.login}{name}  id={user.id}  {user.html_url}"]
    if user.bio:
        lines.append(f"  {user.bio}")
    lines.append(
        f"  {user.public_repos} public repos, {user.public_gists} gists, "
        f"joined {format_date(user.created_at)}"
    )
    return lines


def format_item(kind: EntityKind, item: Any) -> str:
    """Plain one-line rendering of an item."""
    if kind in (EntityKind.ACTIVITY, EntityKind.RECEIVED):
        text = describe_event(item, show_actor=kind == EntityKind.RECEIVED)
        return f"{relative_time(item.created_at):>16}  {item.type:<18} {text}"
    if kind == EntityKind.SUBSCRIPTIONS:
        archived = " [archived]" if item.archived else ""
        return (
            f"{item.full_name}{archived}  ({item.language or '-'}, "
            f"{item.stargazers_count} stars, {format_size(item.size)})"
        )
    description = f" - {item.description}" if item.description else ""
    return f"{format_date(item.created_at)}  {gist_title(item)}{description}"


def format_status(kind: EntityKind, snapshot: ListSnapshot) -> str:
    """Plain status footer: error, empty, no matches, or counts."""
    if snapshot.last_error is not None:
        return snapshot.last_error_message or "Failed to load data."
    if snapshot.is_empty:
        return KIND_SPECS[kind].empty_message
    if snapshot.no_matches:
        return NO_MATCHES_MESSAGE
    more = ", more available" if snapshot.has_more else ", end of list"
    return (
        f"{len(snapshot.items)} of {snapshot.total} items "
        f"from {snapshot.current_page} page(s){more}"
    )


@dataclass
class Summary:
    """Rendered summary text plus the list state it was built from."""

    text: str
    snapshot: ListSnapshot

    @property
    def failed(self) -> bool:
        return self.snapshot.last_error is not None


async def collect_summary(
    source: GitHubSource,
    username: str,
    kind: EntityKind = EntityKind.ACTIVITY,
    search: str = "",
    category: Optional[str] = None,
    pages: int = 1,
) -> Summary:
    """Fetch a profile plus up to ``pages`` pages of one kind and format them.

    A failed list page is reported in the status footer and in
    ``Summary.failed``; pages loaded before it are kept.

    Raises:
        NotFoundError: the user does not exist
        SourceError: the profile lookup failed
    """
    user = await source.fetch_user(username)
    controller = PaginatedListController(source, kind, link_resolver=LINK_RESOLVERS[kind])
    await controller.initialize(user.login)
    while controller.current_page < pages and controller.has_more and controller.last_error is None:
        await controller.load_more()

    controller.set_search_query(search)
    controller.set_category(category)

    snapshot = controller.snapshot()
    lines = format_user(user)
    lines.append("")
    lines.append(f"{KIND_SPECS[kind].title}")
    for item in snapshot.items:
        lines.append(f"  {format_item(kind, item)}")
    lines.append("")
    lines.append(format_status(kind, snapshot))
    return Summary("\n".join(lines), snapshot)


async def build_summary(
    source: GitHubSource,
    username: str,
    kind: EntityKind = EntityKind.ACTIVITY,
    search: str = "",
    category: Optional[str] = None,
    pages: int = 1,
) -> str:
    summary = await collect_summary(
        source, username, kind=kind, search=search, category=category, pages=pages
    )
    return summary.text
