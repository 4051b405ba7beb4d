#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Shared formatting utilities for TUI components.

Consolidates event labels, colors, links and date/size formatting used by
both the Textual app and the plain-text summary mode. Nothing here holds
state; every function is safe to call on partially populated models.
"""

import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from rich.markup import escape

from ghlens.controller import ListSnapshot
from ghlens.filtering import KIND_SPECS, NO_MATCHES_MESSAGE
from ghlens.models import EntityKind, GitHubEvent, GitHubGist


# Semantic color mapping for Textual/Rich markup (color names, not ANSI codes)
EVENT_TYPE_COLORS = {
    "PushEvent": "green",
    "ForkEvent": "cyan",
    "WatchEvent": "yellow",
    "CreateEvent": "bright_green",
    "DeleteEvent": "red",
    "PullRequestEvent": "magenta",
    "IssuesEvent": "bright_magenta",
    "IssueCommentEvent": "blue",
    "MemberEvent": "bright_cyan",
    "PublicEvent": "bright_blue",
    "ReleaseEvent": "bold yellow",
}

EVENT_ICONS = {
    "PushEvent": "↑",  # up arrow
    "ForkEvent": "⑂",  # fork
    "WatchEvent": "★",  # star
    "CreateEvent": "+",
    "PullRequestEvent": "⇄",  # arrows
    "IssuesEvent": "◎",  # bullseye
    "IssueCommentEvent": "✎",  # pencil
    "DeleteEvent": "✗",  # cross
    "MemberEvent": "☺",  # face
    "PublicEvent": "○",
    "ReleaseEvent": "⚑",  # flag
}
DEFAULT_EVENT_ICON = "○"


def event_icon(event_type: str) -> str:
    return EVENT_ICONS.get(event_type, DEFAULT_EVENT_ICON)


def event_color(event_type: str) -> str:
    return EVENT_TYPE_COLORS.get(event_type, "white")


def event_url(event: GitHubEvent) -> str:
    """Most specific web link for an event, falling back to the repository."""
    repo_url = event.repo_url

    if event.type == "PushEvent":
        commits = event.commits
        if commits and commits[0].sha:
            return f"{repo_url}/commit/{commits[0].sha}"
        return repo_url
    if event.type == "PullRequestEvent":
        return event.payload_url("pull_request") or repo_url
    if event.type == "IssuesEvent":
        return event.payload_url("issue") or repo_url
    if event.type == "IssueCommentEvent":
        return event.payload_url("comment") or event.payload_url("issue") or repo_url
    if event.type == "ForkEvent":
        return event.payload_url("forkee") or repo_url
    if event.type == "ReleaseEvent":
        return event.payload_url("release") or repo_url
    return repo_url


def describe_event(event: GitHubEvent, show_actor: bool = False) -> str:
    """One-line sentence describing an event, e.g. "pushed to main in a/b".

    Args:
        event: The event to describe
        show_actor: Prefix the actor login (used for received events)
    """
    repo = event.repo_name
    if event.type == "PushEvent":
        text = f"pushed to {event.branch or '?'} in {repo}"
    elif event.type == "ForkEvent":
        text = f"forked {repo}"
    elif event.type == "WatchEvent":
        text = f"starred {repo}"
    elif event.type == "CreateEvent":
        text = f"created repository {repo}"
    elif event.type == "PullRequestEvent":
        text = f"{event.action or 'updated'} a pull request in {repo}"
    elif event.type == "IssuesEvent":
        text = f"{event.action or 'updated'} issue in {repo}"
    elif event.type == "IssueCommentEvent":
        text = f"commented on issue in {repo}"
    else:
        label = event.type[:-len("Event")] if event.type.endswith("Event") else event.type
        text = f"{label or 'Activity'} on {repo}"

    if show_actor and event.actor.login:
        return f"{event.actor.login} {text}"
    return text


def _parse_iso(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def relative_time(value: str, now: Optional[datetime] = None) -> str:
    """Humanized age of an ISO timestamp ("5 minutes ago", "2 days ago")."""
    dt = _parse_iso(value)
    if dt is None:
        return value or "-"
    now = now or datetime.now(timezone.utc)
    seconds = (now - dt).total_seconds()
    future = seconds < 0
    seconds = abs(seconds)

    if seconds < 45:
        text = "a few seconds"
    elif seconds < 90:
        text = "a minute"
    elif seconds < 45 * 60:
        text = f"{round(seconds / 60)} minutes"
    elif seconds < 90 * 60:
        text = "an hour"
    elif seconds < 22 * 3600:
        text = f"{round(seconds / 3600)} hours"
    elif seconds < 36 * 3600:
        text = "a day"
    elif seconds < 26 * 86400:
        text = f"{round(seconds / 86400)} days"
    elif seconds < 45 * 86400:
        text = "a month"
    elif seconds < 320 * 86400:
        text = f"{round(seconds / (30 * 86400))} months"
    elif seconds < 548 * 86400:
        text = "a year"
    else:
        text = f"{round(seconds / (365 * 86400))} years"

    return f"in {text}" if future else f"{text} ago"


def format_date(value: str) -> str:
    """Format an ISO timestamp as "Jan 05, 2024"."""
    dt = _parse_iso(value)
    if dt is None:
        return value or "-"
    return dt.strftime("%b %d, %Y")


def format_size(size_kb: int) -> str:
    """Repository size (API reports KB) as KB or MB."""
    if not size_kb:
        return "0 KB"
    if size_kb > 1024:
        return f"{size_kb / 1024:.1f} MB"
    return f"{size_kb} KB"


def gist_title(gist: GitHubGist) -> str:
    names = gist.filenames
    return names[0] if names else "Untitled Gist"


def payload_scalars(payload: Dict[str, Any]) -> List[Tuple[str, str]]:
    """Simple (non-object) payload fields as (label, value) rows.

    Labels are the key with underscores replaced by spaces and the first
    letter capitalized. Lists and dicts are skipped; None shows as "null".
    """
    rows = []
    for key, value in payload.items():
        if key == "commits" or isinstance(value, (dict, list)):
            continue
        label = key.replace("_", " ")
        label = label[:1].upper() + label[1:]
        rows.append((label, "null" if value is None else str(value)))
    return rows


def raw_payload(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, sort_keys=False, default=str)


# Per-kind link resolvers handed to the list controllers
LINK_RESOLVERS: Dict[EntityKind, Callable[[Any], Optional[str]]] = {
    EntityKind.ACTIVITY: event_url,
    EntityKind.RECEIVED: event_url,
    EntityKind.SUBSCRIPTIONS: lambda repo: repo.html_url or None,
    EntityKind.GISTS: lambda gist: gist.html_url or None,
}


def status_text(kind: EntityKind, snapshot: ListSnapshot) -> str:
    """Status line under a list: loading, error, empty, no matches, or counts.

    Loading wins over everything else; an error is shown even when items
    are loaded (they stay browsable). Empty and no-matches are distinct.
    """
    if snapshot.is_loading:
        return "Loading..."
    if snapshot.last_error is not None:
        message = escape(snapshot.last_error_message or "Failed to load data.")
        return f"[red]{message}[/red] [dim](press r to retry)[/dim]"
    if snapshot.is_empty:
        return f"[dim]{KIND_SPECS[kind].empty_message}[/dim]"
    if snapshot.no_matches:
        return f"[dim]{NO_MATCHES_MESSAGE}[/dim]"

    shown = len(snapshot.items)
    counts = f"{shown} of {snapshot.total}" if shown != snapshot.total else f"{shown}"
    tail = "press m to load more" if snapshot.has_more else "end of list"
    return f"{counts} items [dim]· {tail}[/dim]"
