#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Main TUI application for the ghlens activity viewer.

Three screens mirror the browsing flow:
- SearchScreen: pick a username (or one of the quick picks)
- DashboardScreen: profile card plus one tab per entity kind
  (recent activity, received events, subscriptions, gists)
- EventDetailScreen: modal with the full payload of one event

Each tab is a CollectionPane that owns a PaginatedListController. Panes
bind to the current user on first activation only (lazy loading), and
all fetching runs in Textual workers so the UI stays responsive.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

from rich.markup import escape
from rich.text import Text
from textual import events, work
from textual.app import App, ComposeResult, SystemCommand
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.css.query import NoMatches
from textual.screen import ModalScreen, Screen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    LoadingIndicator,
    Select,
    Static,
    TabbedContent,
    TabPane,
)

from ghlens.controller import PaginatedListController, describe_error
from ghlens.debug_logger import get_logger
from ghlens.filtering import KIND_SPECS
from ghlens.models import ALL_CATEGORIES, EntityKind, GitHubEvent, GitHubUser
from ghlens.source import CollectionSource, GitHubSource, NotFoundError, SourceError
from ghlens.tui.app_state import AppState
from ghlens.tui.formatting import (
    LINK_RESOLVERS,
    describe_event,
    event_color,
    event_icon,
    event_url,
    format_date,
    format_size,
    gist_title,
    payload_scalars,
    raw_payload,
    relative_time,
    status_text,
)

QUICK_PICKS = (
    ("torvalds", "Linus Torvalds"),
    ("yyx990803", "Evan You"),
    ("taylorotwell", "Taylor Otwell"),
)

# (label, column key) per kind
COLUMNS: Dict[EntityKind, List[tuple]] = {
    EntityKind.ACTIVITY: [
        ("", "icon"),
        ("Type", "type"),
        ("Description", "description"),
        ("When", "when"),
    ],
    EntityKind.RECEIVED: [
        ("", "icon"),
        ("Actor", "actor"),
        ("Type", "type"),
        ("Description", "description"),
        ("When", "when"),
    ],
    EntityKind.SUBSCRIPTIONS: [
        ("Repository", "repo"),
        ("Language", "language"),
        ("Stars", "stars"),
        ("Forks", "forks"),
        ("Watchers", "watchers"),
        ("Size", "size"),
        ("Updated", "updated"),
        ("Description", "description"),
    ],
    EntityKind.GISTS: [
        ("Gist", "title"),
        ("Files", "files"),
        ("Description", "description"),
        ("Created", "created"),
    ],
}


def _row_cells(kind: EntityKind, item: Any) -> List[Text]:
    """Table cells for one item. Text objects so names are never parsed as markup."""
    if kind in (EntityKind.ACTIVITY, EntityKind.RECEIVED):
        color = event_color(item.type)
        cells = [Text(event_icon(item.type), style=color)]
        if kind == EntityKind.RECEIVED:
            cells.append(Text(item.actor.login, style="bold"))
        cells.append(Text(item.type, style=color))
        description = describe_event(item)
        commits = item.commits
        if item.type == "PushEvent" and commits and commits[0].message:
            headline = commits[0].message.splitlines()[0]
            description = f"{description} - {headline}"
        cells.append(Text(description))
        cells.append(Text(relative_time(item.created_at), style="dim"))
        return cells

    if kind == EntityKind.SUBSCRIPTIONS:
        name = Text(item.full_name, style="bold")
        if item.archived:
            name.append(" (archived)", style="yellow")
        return [
            name,
            Text(item.language or "-"),
            Text(str(item.stargazers_count)),
            Text(str(item.forks_count)),
            Text(str(item.watchers_count)),
            Text(format_size(item.size)),
            Text(relative_time(item.updated_at), style="dim"),
            Text(item.description or "No description provided.", style="dim"),
        ]

    return [
        Text(gist_title(item), style="bold"),
        Text(", ".join(item.filenames) or "-"),
        Text(item.description or "No description.", style="dim"),
        Text(format_date(item.created_at)),
    ]


def _profile_markup(user: GitHubUser) -> str:
    name = f" ({escape(user.name)})" if user.name else ""
    lines = [
        f"[bold]{escape(user.login)}[/bold]{name}  [dim]ID: {user.id}[/dim]",
        f"[dim]{escape(user.html_url)}[/dim]",
    ]
    if user.bio:
        lines.append(escape(user.bio))
    lines.append(
        f"[bold]{user.public_repos}[/bold] Public Repos  ·  "
        f"Joined [bold]{format_date(user.created_at)}[/bold]  ·  "
        f"Updated [bold]{relative_time(user.updated_at)}[/bold]"
    )
    return "\n".join(lines)


def _tab_label(kind: EntityKind, user: Optional[GitHubUser]) -> str:
    if kind == EntityKind.GISTS and user is not None:
        return f"{user.public_gists} Gists"
    return KIND_SPECS[kind].title


class EventDetailScreen(ModalScreen):
    """Modal screen showing one event in full.

    Displays:
    - General information (id, type, time, repository)
    - Simple payload properties
    - Commits carried by the payload
    - Raw payload JSON
    - The actor who triggered it
    """

    BINDINGS = [
        Binding("escape", "dismiss", "Back"),
        Binding("o", "open_event", "Open on GitHub"),
        Binding("a", "open_actor", "Actor profile"),
    ]

    def __init__(self, event: GitHubEvent) -> None:
        super().__init__()
        self.event = event

    def compose(self) -> ComposeResult:
        """Compose the modal content."""
        event = self.event
        actor = event.actor

        with Vertical(id="event-detail-modal"):
            yield Static(
                f"[bold]Details for {escape(event.type)} #{escape(event.id)}[/bold]",
                classes="modal-title",
            )
            yield Static(
                f"Triggered by user '{escape(actor.login)}' on repository '{escape(event.repo_name)}'",
                classes="section-description",
            )

            with VerticalScroll(id="event-detail-content"):
                yield Static("General Information", classes="section-title")
                yield Static(f"[bold]Event ID:[/bold] {escape(event.id)}")
                yield Static(f"[bold]Event Type:[/bold] {escape(event.type)}")
                yield Static(f"[bold]Created At:[/bold] {escape(event.created_at)}")
                yield Static(f"[bold]Repository:[/bold] {escape(event.repo_url)}")

                yield Static("Payload", classes="section-title")
                scalars = payload_scalars(event.payload)
                if scalars:
                    for label, value in scalars:
                        yield Static(f"[bold]{escape(label)}:[/bold] {escape(value)}")
                else:
                    yield Static("[dim]No simple payload properties to display.[/dim]")

                commits = event.commits
                yield Static(f"Commits ({len(commits)})", classes="section-title")
                if commits:
                    for commit in commits:
                        yield Static(
                            f"[cyan]{escape(commit.short_sha)}[/cyan] "
                            f"{escape(commit.message)} [dim]({escape(commit.author_name)})[/dim]"
                        )
                else:
                    yield Static("[dim]No commits found in payload.[/dim]")

                yield Static("Raw Data", classes="section-title")
                yield Static(raw_payload(event.payload), markup=False, classes="raw-payload")

                yield Static("Actor", classes="section-title")
                yield Static(f"[bold]{escape(actor.display_login or actor.login)}[/bold]  [dim]ID: {actor.id}[/dim]")
                yield Static(f"[dim]{escape(actor.html_url)}[/dim]")

            with Horizontal(classes="modal-buttons"):
                yield Button("Back to List", id="close-modal", variant="primary")
                yield Button("Open on GitHub", id="open-event")

    def action_open_event(self) -> None:
        self.app.open_url(event_url(self.event))

    def action_open_actor(self) -> None:
        self.app.open_url(self.event.actor.html_url)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button press events."""
        if event.button.id == "close-modal":
            self.dismiss()
        elif event.button.id == "open-event":
            self.action_open_event()


class CollectionPane(Vertical):
    """One dashboard tab: search/filter row, item table, status, load-more.

    The pane is a thin view over its controller; every intent goes to the
    controller and the table is re-rendered from a fresh snapshot.
    """

    def __init__(self, kind: EntityKind, source: CollectionSource) -> None:
        super().__init__(id=f"pane-{kind.value}", classes="collection-pane")
        self.kind = kind
        self.controller = PaginatedListController(
            source, kind, link_resolver=LINK_RESOLVERS[kind]
        )
        self._row_items: List[Any] = []

    def compose(self) -> ComposeResult:
        spec = KIND_SPECS[self.kind]
        yield Static(spec.title, classes="section-title")
        yield Static(f"[dim]{spec.description}[/dim]", classes="section-description")
        with Horizontal(classes="filter-row"):
            yield Input(
                placeholder="Search loaded items...",
                id=f"search-{self.kind.value}",
                classes="search-input",
            )
            if spec.categories:
                options = [("All Types", ALL_CATEGORIES)] + [(c, c) for c in spec.categories]
                yield Select(
                    options,
                    value=ALL_CATEGORIES,
                    allow_blank=False,
                    id=f"category-{self.kind.value}",
                    classes="category-select",
                )
        yield DataTable(id=f"list-{self.kind.value}", classes="item-list")
        yield Static("", id=f"status-{self.kind.value}", classes="list-status")
        yield Button("Load More", id=f"more-{self.kind.value}", classes="load-more")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        for label, key in COLUMNS[self.kind]:
            table.add_column(label, key=key)
        self.refresh_view()

    # -- intents -----------------------------------------------------------

    def bind_subject(self, subject: str) -> None:
        self._drive(self.controller.rebind, subject)

    def load_more(self) -> None:
        # Nothing to extend yet; r re-requests the failed first page
        if self.controller.is_loading or not self.controller.has_more or self.controller.is_empty:
            return
        self._drive(self.controller.load_more)

    def retry(self) -> None:
        if self.controller.last_error is None:
            return
        self._drive(self.controller.retry)

    def focus_search(self) -> None:
        self.query_one(".search-input", Input).focus()

    def clear_search(self) -> None:
        search = self.query_one(".search-input", Input)
        search.value = ""
        self.controller.set_search_query("")
        self.refresh_view()

    @work(group="fetch")
    async def _drive(self, operation: Callable[..., Awaitable[None]], *args: Any) -> None:
        """Run a controller coroutine, re-rendering when it starts and ends."""
        task = asyncio.ensure_future(operation(*args))
        await asyncio.sleep(0)  # let the controller flip is_loading first
        self.refresh_view()
        try:
            await task
        finally:
            self.refresh_view()

    # -- rendering ---------------------------------------------------------

    def refresh_view(self) -> None:
        """Re-render table, status line and load-more button from a snapshot."""
        if not self.is_mounted:
            return
        snapshot = self.controller.snapshot()
        table = self.query_one(DataTable)
        cursor_row = table.cursor_row

        table.clear()
        self._row_items = list(snapshot.items)
        # Positional keys: the same item may legitimately appear on two pages
        for index, item in enumerate(self._row_items):
            table.add_row(*_row_cells(self.kind, item), key=str(index))
        if self._row_items and cursor_row > 0:
            table.move_cursor(row=min(cursor_row, len(self._row_items) - 1))

        self.query_one(".list-status", Static).update(status_text(self.kind, snapshot))
        more = self.query_one(".load-more", Button)
        more.display = snapshot.has_more and not snapshot.is_loading and not snapshot.is_empty

    # -- events ------------------------------------------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        """Live search: filter the loaded items on every keystroke."""
        if event.input.id == f"search-{self.kind.value}":
            self.controller.set_search_query(event.value)
            self.refresh_view()
            event.stop()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in the search box moves focus to the table."""
        if event.input.id == f"search-{self.kind.value}":
            self.query_one(DataTable).focus()
            event.stop()

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == f"category-{self.kind.value}":
            value = event.value if isinstance(event.value, str) else None
            self.controller.set_category(value)
            self.refresh_view()
            event.stop()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == f"more-{self.kind.value}":
            self.load_more()
            event.stop()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Enter/click on a row activates the item."""
        if event.row_key is None or event.row_key.value is None:
            return
        try:
            item = self._row_items[int(event.row_key.value)]
        except (ValueError, IndexError):
            return
        event.stop()
        self.app.activate_item(self.kind, item, self.controller.resolve_link(item))

    def on_key(self, event: events.Key) -> None:
        """Escape in a non-empty search box clears it."""
        if event.key != "escape":
            return
        search = self.query_one(".search-input", Input)
        if search.has_focus and search.value:
            self.clear_search()
            event.prevent_default()
            event.stop()


class SearchScreen(Screen):
    """Landing screen: username input and quick picks."""

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="search-panel"):
            yield Static("Discover GitHub Activity", classes="modal-title")
            yield Static(
                "[dim]Browse public user activity on GitHub.[/dim]",
                classes="section-description",
            )
            with Horizontal(classes="filter-row"):
                yield Input(placeholder="Enter GitHub username...", id="search-username")
                yield Button("Search", id="search-button", variant="primary", classes="lookup-button")
            yield LoadingIndicator(id="lookup-loading")
            yield Static("[dim]Or try one of these:[/dim]")
            with Horizontal(id="quick-picks"):
                for login, name in QUICK_PICKS:
                    yield Button(name, id=f"pick-{login}", classes="quick-pick")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#lookup-loading", LoadingIndicator).display = False
        self.query_one("#search-username", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search-username":
            self.app.lookup_user(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id == "search-button":
            self.app.lookup_user(self.query_one("#search-username", Input).value)
        elif button_id.startswith("pick-"):
            self.app.lookup_user(button_id[len("pick-"):])


class DashboardScreen(Screen):
    """Profile card plus one lazily loaded tab per entity kind."""

    BINDINGS = [
        Binding("f1", "switch_tab('activity')", "Activity"),
        Binding("f2", "switch_tab('received')", "Received"),
        Binding("f3", "switch_tab('subscriptions')", "Subscriptions"),
        Binding("f4", "switch_tab('gists')", "Gists"),
        Binding("m", "load_more", "Load more"),
        Binding("r", "retry", "Retry"),
        Binding("slash", "focus_search", "Search"),
        Binding("ctrl+h", "go_home", "Home"),
    ]

    def __init__(self, user: GitHubUser, source: CollectionSource, state: AppState) -> None:
        super().__init__()
        self.user = user
        self.source = source
        self.state = state
        self.panes: Dict[EntityKind, CollectionPane] = {}

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="dashboard"):
            with Horizontal(classes="filter-row", id="subject-row"):
                yield Static("User: ", classes="filter-label")
                yield Input(placeholder="Enter GitHub username...", id="subject-input")
                yield Button("Search", id="subject-search", variant="primary", classes="lookup-button")
            yield Static(_profile_markup(self.user), id="profile-card")
            with TabbedContent(initial=self.state.active_tab, id="kind-tabs"):
                for kind in EntityKind:
                    with TabPane(_tab_label(kind, self.user), id=kind.value):
                        pane = CollectionPane(kind, self.source)
                        self.panes[kind] = pane
                        yield pane
        yield Footer()

    def on_mount(self) -> None:
        # Only the initial tab loads now; the rest wait for activation
        self._activate(self.state.active_tab)

    @property
    def active_pane(self) -> CollectionPane:
        return self.panes[EntityKind(self.state.active_tab)]

    def _activate(self, tab_id: str) -> None:
        """Bind a tab's controller to the current user on first visit."""
        try:
            kind = EntityKind(tab_id)
        except ValueError:
            return
        self.state.active_tab = tab_id
        pane = self.panes[kind]
        # Keep focus off the subject input so screen keys (m, r, /) reach us
        pane.query_one(DataTable).focus()
        if not self.state.tabs_loaded.get(tab_id, False):
            self.state.tabs_loaded[tab_id] = True
            pane.bind_subject(self.user.login)

    def show_user(self, user: GitHubUser) -> None:
        """Switch the dashboard to another user, rebinding loaded tabs."""
        self.user = user
        try:
            self.query_one("#profile-card", Static).update(_profile_markup(user))
            tabs = self.query_one(TabbedContent)
            tabs.get_tab(EntityKind.GISTS.value).label = _tab_label(EntityKind.GISTS, user)
        except NoMatches:
            pass
        for tab_id, loaded in list(self.state.tabs_loaded.items()):
            if loaded:
                self.panes[EntityKind(tab_id)].bind_subject(user.login)

    def on_tabbed_content_tab_activated(self, event: TabbedContent.TabActivated) -> None:
        """Handle tab activation - load data on first visit (lazy loading)."""
        if event.pane is not None and event.pane.id:
            self._activate(event.pane.id)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "subject-input":
            self.app.lookup_user(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "subject-search":
            self.app.lookup_user(self.query_one("#subject-input", Input).value)

    def action_switch_tab(self, tab_id: str) -> None:
        """Switch to a specific tab."""
        self.query_one(TabbedContent).active = tab_id

    def action_load_more(self) -> None:
        self.active_pane.load_more()

    def action_retry(self) -> None:
        self.active_pane.retry()

    def action_focus_search(self) -> None:
        self.active_pane.focus_search()

    def action_go_home(self) -> None:
        self.app.go_home()


class GhLensApp(App):
    """
    Main Textual application for browsing a GitHub user's public activity.

    Starts on the search screen (or straight on the dashboard when a
    username is given) and keeps one dashboard per looked-up user.
    """

    TITLE = "ghlens"
    SUB_TITLE = "GitHub activity viewer"
    CSS_PATH = "styles/app.tcss"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        username: Optional[str] = None,
        source: Optional[CollectionSource] = None,
    ) -> None:
        """
        Initialize the app.

        Args:
            username: Look this user up immediately (optional)
            source: Override the GitHub source (tests inject a fake)
        """
        super().__init__()
        self.state = AppState()
        self.source = source if source is not None else GitHubSource()
        self.dashboard: Optional[DashboardScreen] = None
        self._initial_username = username

    def get_system_commands(self, screen: Screen) -> Iterable[SystemCommand]:
        """Add custom commands to the command palette."""
        yield from super().get_system_commands(screen)
        yield SystemCommand("Home", "Back to the user search screen", self.go_home)
        if self.dashboard is not None:
            yield SystemCommand(
                "Load More", "Fetch the next page of the current tab", self.dashboard.action_load_more
            )
            yield SystemCommand(
                "Retry", "Re-request the page that failed to load", self.dashboard.action_retry
            )

    def on_mount(self) -> None:
        self.push_screen(SearchScreen())
        if self._initial_username:
            self.lookup_user(self._initial_username)

    async def on_unmount(self) -> None:
        close = getattr(self.source, "aclose", None)
        if close is not None:
            await close()

    # -- user lookup -------------------------------------------------------

    def _set_lookup_busy(self, busy: bool) -> None:
        for screen in self.screen_stack:
            for button in screen.query(".lookup-button").results(Button):
                button.disabled = busy
                button.label = "Loading..." if busy else "Search"
            for indicator in screen.query("#lookup-loading").results(LoadingIndicator):
                indicator.display = busy

    @work(exclusive=True, group="lookup")
    async def lookup_user(self, username: str) -> None:
        """Fetch a profile and open (or switch) the dashboard on success."""
        username = username.strip()
        if not username:
            return

        lookup = self.state.lookup
        lookup.pending = username
        self._set_lookup_busy(True)
        try:
            user = await self.source.fetch_user(username)
        except NotFoundError:
            lookup.last_failed = username
            lookup.last_message = f"User '{username}' not found."
            self.notify(lookup.last_message, severity="error")
            return
        except SourceError as e:
            get_logger().error("lookup_user", str(e))
            lookup.last_failed = username
            lookup.last_message = describe_error(e)
            self.notify(lookup.last_message, severity="error")
            return
        finally:
            lookup.pending = None
            self._set_lookup_busy(False)

        lookup.last_failed = None
        lookup.last_message = None
        self.show_user(user)

    def show_user(self, user: GitHubUser) -> None:
        self.state.user = user
        self.sub_title = user.login
        if self.dashboard is None:
            self.state.tabs_loaded.clear()
            self.dashboard = DashboardScreen(user, self.source, self.state)
            self.push_screen(self.dashboard)
        else:
            self.dashboard.show_user(user)

    def go_home(self) -> None:
        """Tear down the dashboard and return to the search screen."""
        while self.dashboard is not None and self.dashboard in self.screen_stack:
            self.pop_screen()
        self.dashboard = None
        self.state.reset_user()
        self.sub_title = self.SUB_TITLE

    # -- item activation ---------------------------------------------------

    def activate_item(self, kind: EntityKind, item: Any, link: Optional[str]) -> None:
        """Own events open the detail modal; everything else opens its link."""
        if kind == EntityKind.ACTIVITY:
            self.push_screen(EventDetailScreen(item))
        elif link:
            self.open_url(link)
        else:
            self.notify("No link available for this item.", severity="warning")


def run_app(username: Optional[str] = None) -> None:
    """
    Run the TUI application.

    Args:
        username: Open this user's dashboard straight away (optional)
    """
    app = GhLensApp(username=username)
    app.run()


if __name__ == "__main__":
    run_app()
