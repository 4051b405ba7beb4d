#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Tests for the per-kind search predicates and category classifiers."""

import pytest

from ghlens.filtering import KIND_SPECS, FilterState, category_of, matches, visible
from ghlens.models import ALL_CATEGORIES, EntityKind


class TestMatches:
    def test_empty_query_matches_everything(self, make_event, make_repo, make_gist):
        assert matches(EntityKind.ACTIVITY, make_event("1"), "")
        assert matches(EntityKind.SUBSCRIPTIONS, make_repo(1), "")
        assert matches(EntityKind.GISTS, make_gist("g"), "")

    def test_activity_matches_type_and_repo(self, make_event):
        event = make_event("1", type="WatchEvent", repo="rails/rails", actor="dhh")

        assert matches(EntityKind.ACTIVITY, event, "watch")
        assert matches(EntityKind.ACTIVITY, event, "RAILS/")
        # Actor is not a search field for own activity
        assert not matches(EntityKind.ACTIVITY, event, "dhh")

    def test_received_also_matches_actor(self, make_event):
        event = make_event("1", type="ForkEvent", repo="a/b", actor="defunkt")

        assert matches(EntityKind.RECEIVED, event, "DEFUNKT")
        assert matches(EntityKind.RECEIVED, event, "fork")
        assert not matches(EntityKind.RECEIVED, event, "push")

    def test_repo_matches_name_and_description(self, make_repo):
        repo = make_repo(1, name="linguist", description="Language Savant")

        assert matches(EntityKind.SUBSCRIPTIONS, repo, "lingu")
        assert matches(EntityKind.SUBSCRIPTIONS, repo, "savant")
        assert not matches(EntityKind.SUBSCRIPTIONS, repo, "python")

    def test_repo_without_description_never_fails(self, make_repo):
        repo = make_repo(1, name="dotfiles")

        assert repo.description is None
        assert not matches(EntityKind.SUBSCRIPTIONS, repo, "config")

    def test_gist_matches_any_filename(self, make_gist):
        gist = make_gist("g1", "setup.sh", "notes.md", description="Bootstrap script")

        assert matches(EntityKind.GISTS, gist, "notes")
        assert matches(EntityKind.GISTS, gist, "SETUP.SH")
        assert matches(EntityKind.GISTS, gist, "bootstrap")
        assert not matches(EntityKind.GISTS, gist, "readme")

    def test_gist_with_no_files_or_description(self, make_gist):
        gist = make_gist("g2")

        assert not matches(EntityKind.GISTS, gist, "anything")


class TestCategories:
    def test_event_category_is_type(self, make_event):
        assert category_of(EntityKind.ACTIVITY, make_event("1", type="IssuesEvent")) == "IssuesEvent"
        assert category_of(EntityKind.RECEIVED, make_event("1", type="PushEvent")) == "PushEvent"

    def test_kinds_without_categories(self, make_repo, make_gist):
        assert category_of(EntityKind.SUBSCRIPTIONS, make_repo(1)) is None
        assert category_of(EntityKind.GISTS, make_gist("g")) is None
        assert KIND_SPECS[EntityKind.SUBSCRIPTIONS].categories == ()
        assert KIND_SPECS[EntityKind.GISTS].categories == ()

    def test_category_lists(self):
        assert "IssueCommentEvent" in KIND_SPECS[EntityKind.ACTIVITY].categories
        assert len(KIND_SPECS[EntityKind.ACTIVITY].categories) == 7
        assert len(KIND_SPECS[EntityKind.RECEIVED].categories) == 5
        assert ALL_CATEGORIES not in KIND_SPECS[EntityKind.ACTIVITY].categories


class TestVisible:
    @pytest.fixture
    def events(self, make_event):
        return [
            make_event("1", type="PushEvent", repo="a/one"),
            make_event("2", type="WatchEvent", repo="b/two"),
            make_event("3", type="PushEvent", repo="c/three"),
        ]

    def test_identity_returns_copy_of_all(self, events):
        state = FilterState()
        result = visible(EntityKind.ACTIVITY, events, state)

        assert state.is_identity
        assert result == events
        assert result is not events

    def test_search_and_category_combine(self, events):
        state = FilterState(search_query="three", active_category="PushEvent")

        assert [e.id for e in visible(EntityKind.ACTIVITY, events, state)] == ["3"]

    def test_preserves_order(self, events):
        state = FilterState(active_category="PushEvent")

        assert [e.id for e in visible(EntityKind.ACTIVITY, events, state)] == ["1", "3"]

    def test_no_matches_returns_empty(self, events):
        state = FilterState(search_query="zzz")

        assert visible(EntityKind.ACTIVITY, events, state) == []


def test_every_kind_is_described():
    for kind in EntityKind:
        spec = KIND_SPECS[kind]
        assert spec.kind == kind
        assert spec.title
        assert spec.empty_message == "No items found."
