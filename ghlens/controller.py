#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Paginated list controller backing every dashboard tab.

A controller is bound to one (subject, kind) pair and owns the
fetch/merge/error/exhaustion state machine for it:

- load_page(n) fetches one page; page 1 replaces the list, later pages append
- an empty page marks the collection exhausted (has_more goes False for good)
- a failed page leaves the list and page counter untouched and records the error
- at most one fetch is in flight; extra calls while loading are no-ops

Rebinding to another subject or kind bumps a generation counter and
cancels the in-flight fetch. A fetch that completes under an older
generation is dropped without touching state, so a slow response for
the previous user can never leak into the new list.

Search and category filters are applied on read (see filtering.py).
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from ghlens.debug_logger import get_logger
from ghlens.filtering import KIND_SPECS, FilterState, visible
from ghlens.models import ALL_CATEGORIES, EntityKind, ErrorKind
from ghlens.source import CollectionSource, NotFoundError, RateLimitError

LinkResolver = Callable[[Any], Optional[str]]


def classify_error(exc: BaseException) -> ErrorKind:
    """Map a fetch exception onto the ErrorKind recorded in state."""
    if isinstance(exc, RateLimitError):
        return ErrorKind.RATE_LIMIT
    if isinstance(exc, NotFoundError):
        return ErrorKind.NOT_FOUND
    return ErrorKind.TRANSPORT


def describe_error(exc: BaseException) -> str:
    """User-facing message for a failed fetch."""
    if isinstance(exc, RateLimitError):
        if exc.reset_at is not None:
            return f"API rate limit exceeded. Resets at {exc.reset_at:%H:%M} UTC."
        return "API rate limit exceeded."
    if isinstance(exc, NotFoundError):
        return "User not found."
    detail = str(exc)
    return f"Failed to load data. {detail}" if detail else "Failed to load data."


@dataclass(frozen=True)
class ListSnapshot:
    """Read-only view of a controller for the presentation layer."""

    items: Tuple[Any, ...]
    total: int
    current_page: int
    is_loading: bool
    has_more: bool
    last_error: Optional[ErrorKind]
    last_error_message: Optional[str]
    is_empty: bool
    no_matches: bool


class PaginatedListController:
    """Incremental fetch + client-side filter for one remote collection."""

    def __init__(
        self,
        source: CollectionSource,
        kind: EntityKind,
        link_resolver: Optional[LinkResolver] = None,
    ) -> None:
        """
        Args:
            source: Anything with ``async fetch(kind, subject, page)``
            kind: Entity kind this controller starts bound to
            link_resolver: Maps an item to an external URL (optional)
        """
        self.source = source
        self.kind = kind
        self.link_resolver = link_resolver
        self.subject: Optional[str] = None
        self.filter = FilterState()

        self._accumulated: List[Any] = []
        self.current_page = 1
        self.has_more = True
        self.is_loading = False
        self.last_error: Optional[ErrorKind] = None
        self.last_error_message: Optional[str] = None

        self._failed_page: Optional[int] = None
        self._generation = 0
        self._inflight: Optional[asyncio.Future] = None
        self._initialized = False

    # -- lifecycle ---------------------------------------------------------

    @property
    def is_bound(self) -> bool:
        return self.subject is not None

    @property
    def generation(self) -> int:
        return self._generation

    def _reset(self, subject: str, kind: EntityKind) -> None:
        """Start a new binding: drop all state and orphan any in-flight fetch."""
        old_subject = self.subject
        cancelled = False
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
            cancelled = True
        self._inflight = None
        self._generation += 1

        if kind != self.kind:
            # Categories are per kind; a stale category would hide everything
            self.filter = FilterState(search_query=self.filter.search_query)
        self.subject = subject
        self.kind = kind
        self._accumulated = []
        self.current_page = 1
        self.has_more = True
        self.is_loading = False
        self.last_error = None
        self.last_error_message = None
        self._failed_page = None
        self._initialized = True

        get_logger().rebind(kind.value, old_subject, subject, cancelled)

    async def initialize(self, subject: str, kind: Optional[EntityKind] = None) -> None:
        """Reset to an empty list for (subject, kind) and load page 1."""
        self._reset(subject, kind or self.kind)
        await self.load_page(1)

    async def rebind(self, subject: str, kind: Optional[EntityKind] = None) -> None:
        """Switch binding; does nothing if (subject, kind) is already current."""
        kind = kind or self.kind
        if self._initialized and subject == self.subject and kind == self.kind:
            return
        await self.initialize(subject, kind)

    # -- fetching ----------------------------------------------------------

    async def load_page(self, page: int) -> None:
        """Fetch one page and merge it. No-op while another fetch is running."""
        if self.is_loading or self.subject is None:
            return
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")

        generation = self._generation
        subject, kind = self.subject, self.kind
        logger = get_logger()

        self.is_loading = True
        self.last_error = None
        self.last_error_message = None
        started = time.perf_counter()
        task = asyncio.ensure_future(self.source.fetch(kind, subject, page))
        self._inflight = task

        try:
            items = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                logger.stale_discarded(kind.value, subject, page)
                return
            raise
        except Exception as e:
            if generation != self._generation:
                logger.stale_discarded(kind.value, subject, page)
                return
            self.last_error = classify_error(e)
            self.last_error_message = describe_error(e)
            self._failed_page = page
            logger.page_failed(kind.value, subject, page, self.last_error.value, str(e))
            return
        finally:
            if generation == self._generation:
                self.is_loading = False
                self._inflight = None

        if generation != self._generation:
            logger.stale_discarded(kind.value, subject, page)
            return

        self._failed_page = None
        if not items:
            self.has_more = False
            logger.exhausted(kind.value, subject, page, len(self._accumulated))
            return

        if page == 1:
            self._accumulated = list(items)
        else:
            self._accumulated = self._accumulated + list(items)
        self.current_page = page
        logger.page_loaded(
            kind.value, subject, page, len(items), len(self._accumulated),
            (time.perf_counter() - started) * 1000,
        )

    async def load_more(self) -> None:
        """Fetch the next page if one may exist and nothing is loading."""
        if self.is_loading or not self.has_more or self.subject is None:
            return
        await self.load_page(self.current_page + 1)

    async def retry(self) -> None:
        """Re-request the page whose fetch last failed."""
        if self.last_error is None or self._failed_page is None:
            return
        await self.load_page(self._failed_page)

    # -- filtering ---------------------------------------------------------

    def set_search_query(self, query: str) -> None:
        self.filter.search_query = query

    def set_category(self, category: Optional[str]) -> None:
        """Apply a category filter; None or unknown values mean "All"."""
        if category is None or category not in KIND_SPECS[self.kind].categories:
            category = ALL_CATEGORIES
        self.filter.active_category = category

    def clear_filters(self) -> None:
        self.filter = FilterState()

    # -- presentation ------------------------------------------------------

    @property
    def accumulated(self) -> Tuple[Any, ...]:
        return tuple(self._accumulated)

    @property
    def items(self) -> List[Any]:
        """Loaded items passing the current search and category filters."""
        return visible(self.kind, self._accumulated, self.filter)

    @property
    def is_empty(self) -> bool:
        return not self._accumulated

    @property
    def no_matches(self) -> bool:
        return bool(self._accumulated) and not self.items

    def item_key(self, item: Any) -> str:
        return KIND_SPECS[self.kind].item_key(item)

    def resolve_link(self, item: Any) -> Optional[str]:
        """External URL for an item, if this kind has a link resolver."""
        if self.link_resolver is None:
            return None
        return self.link_resolver(item)

    def snapshot(self) -> ListSnapshot:
        items = self.items
        return ListSnapshot(
            items=tuple(items),
            total=len(self._accumulated),
            current_page=self.current_page,
            is_loading=self.is_loading,
            has_more=self.has_more,
            last_error=self.last_error,
            last_error_message=self.last_error_message,
            is_empty=not self._accumulated,
            no_matches=bool(self._accumulated) and not items,
        )
