# SPDX-License-Identifier: MIT
"""Tests for TUI app state dataclasses."""

import pytest
from dataclasses import is_dataclass


class TestLookupState:
    """Tests for LookupState dataclass."""

    def test_lookup_state_is_dataclass(self):
        from ghlens.tui.app_state import LookupState

        assert is_dataclass(LookupState)

    def test_lookup_state_defaults(self):
        from ghlens.tui.app_state import LookupState

        state = LookupState()
        assert state.pending is None
        assert state.last_failed is None
        assert state.last_message is None
        assert state.busy is False

    def test_busy_while_pending(self):
        from ghlens.tui.app_state import LookupState

        assert LookupState(pending="octocat").busy is True


class TestAppState:
    """Tests for AppState dataclass."""

    def test_app_state_defaults(self):
        from ghlens.tui.app_state import AppState, LookupState

        state = AppState()
        assert state.user is None
        assert state.subject is None
        assert state.active_tab == "activity"
        assert state.tabs_loaded == {}
        assert isinstance(state.lookup, LookupState)

    def test_instances_do_not_share_containers(self):
        from ghlens.tui.app_state import AppState

        first, second = AppState(), AppState()
        first.tabs_loaded["activity"] = True

        assert second.tabs_loaded == {}
        assert first.lookup is not second.lookup

    def test_subject_follows_user(self, make_user):
        from ghlens.tui.app_state import AppState

        state = AppState(user=make_user("hubot"))
        assert state.subject == "hubot"

    def test_reset_user(self, make_user):
        from ghlens.tui.app_state import AppState

        state = AppState(user=make_user("hubot"), active_tab="gists")
        state.tabs_loaded.update({"activity": True, "gists": True})

        state.reset_user()

        assert state.user is None
        assert state.active_tab == "activity"
        assert state.tabs_loaded == {}
