# SPDX-License-Identifier: MIT
"""State management dataclasses for the TUI app.

The list data itself lives in one PaginatedListController per tab; this
module only holds the shell-level state around them:

- LookupState: the username search (pending lookup, last failure)
- AppState: Top-level container (current user, active tab, lazy-load flags)
"""
from dataclasses import dataclass, field
from typing import Dict, Optional

from ghlens.models import EntityKind, GitHubUser


@dataclass
class LookupState:
    """State of the username lookup shared by search and dashboard inputs."""

    pending: Optional[str] = None
    last_failed: Optional[str] = None
    last_message: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self.pending is not None


@dataclass
class AppState:
    """Top-level app state container.

    ``tabs_loaded`` maps a tab id (the EntityKind value) to whether its
    controller has been bound to the current user. Tabs are bound on
    first activation only.
    """

    user: Optional[GitHubUser] = None
    lookup: LookupState = field(default_factory=LookupState)
    active_tab: str = EntityKind.ACTIVITY.value
    tabs_loaded: Dict[str, bool] = field(default_factory=dict)

    @property
    def subject(self) -> Optional[str]:
        return self.user.login if self.user else None

    def reset_user(self) -> None:
        self.user = None
        self.active_tab = EntityKind.ACTIVITY.value
        self.tabs_loaded.clear()
