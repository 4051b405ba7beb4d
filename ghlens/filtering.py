# SPDX-License-Identifier: MIT
"""Client-side search and category filtering over loaded items.

Everything here is pure and synchronous: the visible subset is
recomputed from the controller's accumulated list on every read, so
typing in the search box never triggers a fetch.

KIND_SPECS is the per-kind dispatch table: which text fields a search
looks at, which category an item belongs to, how items are keyed, and
the labels the shell shows for the tab.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ghlens.models import ALL_CATEGORIES, EntityKind

NO_MATCHES_MESSAGE = "No items match your search filters."


@dataclass
class FilterState:
    """Search text and category currently applied to a list."""

    search_query: str = ""
    active_category: str = ALL_CATEGORIES

    @property
    def is_identity(self) -> bool:
        return not self.search_query and self.active_category == ALL_CATEGORIES


@dataclass(frozen=True)
class KindSpec:
    """Static description of one entity kind."""

    kind: EntityKind
    title: str
    description: str
    empty_message: str
    search_fields: Callable[[Any], Iterable[Optional[str]]]
    item_key: Callable[[Any], str]
    categories: Tuple[str, ...] = ()
    category_of: Optional[Callable[[Any], str]] = None


def _event_fields(item: Any) -> Iterable[Optional[str]]:
    return (item.type, item.repo_name)


def _received_fields(item: Any) -> Iterable[Optional[str]]:
    return (item.actor.login, item.type, item.repo_name)


def _repo_fields(item: Any) -> Iterable[Optional[str]]:
    return (item.name, item.description)


def _gist_fields(item: Any) -> Iterable[Optional[str]]:
    return (*item.filenames, item.description)


def _event_type(item: Any) -> str:
    return item.type


KIND_SPECS: Dict[EntityKind, KindSpec] = {
    EntityKind.ACTIVITY: KindSpec(
        kind=EntityKind.ACTIVITY,
        title="Recent Activity",
        description="Public events triggered by this user.",
        empty_message="No items found.",
        search_fields=_event_fields,
        item_key=lambda item: item.id,
        categories=(
            "PushEvent",
            "WatchEvent",
            "ForkEvent",
            "CreateEvent",
            "PullRequestEvent",
            "IssuesEvent",
            "IssueCommentEvent",
        ),
        category_of=_event_type,
    ),
    EntityKind.RECEIVED: KindSpec(
        kind=EntityKind.RECEIVED,
        title="Received Events",
        description="Events broadcast to this user (activity from people they follow).",
        empty_message="No items found.",
        search_fields=_received_fields,
        item_key=lambda item: item.id,
        categories=("PushEvent", "WatchEvent", "ForkEvent", "CreateEvent", "PullRequestEvent"),
        category_of=_event_type,
    ),
    EntityKind.SUBSCRIPTIONS: KindSpec(
        kind=EntityKind.SUBSCRIPTIONS,
        title="Subscriptions",
        description="Repositories watched by this user.",
        empty_message="No items found.",
        search_fields=_repo_fields,
        item_key=lambda item: str(item.id),
    ),
    EntityKind.GISTS: KindSpec(
        kind=EntityKind.GISTS,
        title="Public Gists",
        description="Code snippets and random files shared publicly.",
        empty_message="No items found.",
        search_fields=_gist_fields,
        item_key=lambda item: item.id,
    ),
}


def matches(kind: EntityKind, item: Any, query: str) -> bool:
    """Case-insensitive substring match against the kind's text fields.

    An empty query matches everything. Missing (None) fields never match.
    """
    if not query:
        return True
    needle = query.lower()
    for value in KIND_SPECS[kind].search_fields(item):
        if value and needle in value.lower():
            return True
    return False


def category_of(kind: EntityKind, item: Any) -> Optional[str]:
    """Category of an item, or None for kinds without a filter dimension."""
    classify = KIND_SPECS[kind].category_of
    return classify(item) if classify else None


def visible(kind: EntityKind, items: Sequence[Any], state: FilterState) -> List[Any]:
    """Items passing both search and category filters, in accumulated order."""
    if state.is_identity:
        return list(items)
    return [
        item
        for item in items
        if matches(kind, item, state.search_query)
        and (
            state.active_category == ALL_CATEGORIES
            or category_of(kind, item) == state.active_category
        )
    ]
