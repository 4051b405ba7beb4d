"""Tests for the JSON-lines debug logger."""
import json

import pytest

pytest_plugins = ("pytest_asyncio",)


def _read_events(path):
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


class TestDebugLogger:
    def test_writes_json_lines_to_state_dir(self, temp_state_dir):
        from ghlens.debug_logger import get_logger

        get_logger().page_loaded("activity", "octocat", 1, 30, 30, 12.345)

        events = _read_events(temp_state_dir / "debug.log")
        assert len(events) == 1
        event = events[0]
        assert event["event"] == "page_loaded"
        assert event["level"] == "info"
        assert event["subject"] == "octocat"
        assert event["count"] == 30
        assert event["duration_ms"] == 12.3
        assert "timestamp" in event
        assert "pid" in event

    def test_level_zero_disables_logging(self, temp_state_dir, monkeypatch):
        monkeypatch.setenv("GHLENS_DEBUG", "0")
        from ghlens.debug_logger import get_logger, reset_logger
        reset_logger()

        get_logger().page_failed("gists", "octocat", 2, "transport", "boom")

        assert not (temp_state_dir / "debug.log").exists()

    def test_verbose_events_need_level_two(self, temp_state_dir, monkeypatch):
        from ghlens.debug_logger import get_logger, reset_logger

        get_logger().http_request("https://api.github.com/users/octocat", 200, 5.0)
        get_logger().stale_discarded("activity", "alice", 1)
        assert _read_events(temp_state_dir / "debug.log") == []

        monkeypatch.setenv("GHLENS_DEBUG", "2")
        reset_logger()
        get_logger().http_request("https://api.github.com/users/octocat", 200, 5.0)
        get_logger().stale_discarded("activity", "alice", 1)

        names = [e["event"] for e in _read_events(temp_state_dir / "debug.log")]
        assert names == ["http_request", "stale_discarded"]

    def test_level_from_settings(self, temp_state_dir, tmp_path, monkeypatch):
        settings = tmp_path / "settings.json"
        settings.write_text(json.dumps({"debug": {"level": 0}}))
        monkeypatch.setenv("GHLENS_SETTINGS", str(settings))
        from ghlens.debug_logger import get_logger, reset_logger
        reset_logger()

        assert get_logger().level == 0

    def test_write_failure_is_swallowed(self, tmp_path):
        from ghlens.debug_logger import DebugLogger

        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        logger = DebugLogger(log_path=blocker / "debug.log", level=1)

        logger.error("lookup_user", "boom")  # must not raise

    def test_rotation(self, tmp_path, monkeypatch):
        import ghlens.debug_logger as debug_logger

        monkeypatch.setattr(debug_logger, "MAX_LOG_BYTES", 10)
        log_path = tmp_path / "debug.log"
        logger = debug_logger.DebugLogger(log_path=log_path, level=1)

        logger.user_lookup("octocat", True, 1.0)
        logger.user_lookup("hubot", False, 1.0)

        rotated = tmp_path / "debug.log.1"
        assert rotated.exists()
        assert _read_events(rotated)[0]["username"] == "octocat"
        assert _read_events(log_path)[0]["username"] == "hubot"

    def test_get_logger_is_singleton_until_reset(self):
        from ghlens.debug_logger import get_logger, reset_logger

        first = get_logger()
        assert get_logger() is first
        reset_logger()
        assert get_logger() is not first


class TestControllerLogging:
    @pytest.mark.asyncio
    async def test_controller_logs_lifecycle(self, temp_state_dir, fake_source, make_event):
        from ghlens.controller import PaginatedListController
        from ghlens.models import EntityKind
        from ghlens.source import TransportError

        fake_source.set_pages(EntityKind.ACTIVITY, "octocat", [make_event("1")])
        fake_source.fail(EntityKind.ACTIVITY, "octocat", 2, TransportError("boom"))
        controller = PaginatedListController(fake_source, EntityKind.ACTIVITY)

        await controller.initialize("octocat")
        await controller.load_more()
        await controller.retry()

        events = _read_events(temp_state_dir / "debug.log")
        names = [e["event"] for e in events]
        assert names == ["rebind", "page_loaded", "page_failed", "exhausted"]
        failed = events[2]
        assert failed["level"] == "error"
        assert failed["error_kind"] == "transport"
        assert failed["page"] == 2
