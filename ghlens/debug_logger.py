# SPDX-License-Identifier: MIT
"""
JSON-lines debug logger for ghlens.

Every event is one JSON object appended to <state_dir>/debug.log:

    {"timestamp": "...", "event": "page_loaded", "level": "info",
     "pid": 1234, "kind": "activity", "subject": "octocat", ...}

Levels (GHLENS_DEBUG env var or "debug.level" setting):
    0 - disabled
    1 - info: user lookups, page loads, failures (default)
    2 - verbose: adds raw HTTP requests and stale-result discards
"""

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ghlens.config import get_int_setting
from ghlens.paths import PathResolver

DEFAULT_LEVEL = 1
MAX_LOG_BYTES = 5 * 1024 * 1024  # rotate once the file passes 5 MB


def _resolve_level() -> int:
    env = os.environ.get("GHLENS_DEBUG")
    if env is not None:
        try:
            return int(env)
        except ValueError:
            return DEFAULT_LEVEL if env.lower() in ("true", "yes", "on") else 0
    return get_int_setting("debug.level", DEFAULT_LEVEL)


class DebugLogger:
    """Appends structured events to the debug log."""

    def __init__(self, log_path: Optional[Path] = None, level: Optional[int] = None) -> None:
        self.log_path = Path(log_path) if log_path else PathResolver.debug_log()
        self.level = _resolve_level() if level is None else level
        self._lock = threading.Lock()

    def _rotate_if_needed(self) -> None:
        try:
            if self.log_path.stat().st_size > MAX_LOG_BYTES:
                self.log_path.replace(self.log_path.with_suffix(".log.1"))
        except FileNotFoundError:
            pass

    def _write(self, event: Dict[str, Any]) -> None:
        if self.level < 1:
            return
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "pid": os.getpid(),
            **event,
        }
        record.setdefault("level", "info")
        line = json.dumps(record, default=str)
        try:
            with self._lock:
                self.log_path.parent.mkdir(parents=True, exist_ok=True)
                self._rotate_if_needed()
                with open(self.log_path, "a") as f:
                    f.write(line + "\n")
        except OSError:
            # Logging must never break the viewer
            pass

    # -- events -------------------------------------------------------------

    def http_request(self, url: str, status: Optional[int], duration_ms: float) -> None:
        if self.level < 2:
            return
        self._write({
            "event": "http_request",
            "level": "debug",
            "url": url,
            "status": status,
            "duration_ms": round(duration_ms, 1),
        })

    def user_lookup(self, username: str, found: bool, duration_ms: float) -> None:
        self._write({
            "event": "user_lookup",
            "username": username,
            "found": found,
            "duration_ms": round(duration_ms, 1),
        })

    def page_loaded(
        self, kind: str, subject: str, page: int, count: int, total: int, duration_ms: float
    ) -> None:
        self._write({
            "event": "page_loaded",
            "kind": kind,
            "subject": subject,
            "page": page,
            "count": count,
            "total": total,
            "duration_ms": round(duration_ms, 1),
        })

    def page_failed(self, kind: str, subject: str, page: int, error_kind: str, message: str) -> None:
        self._write({
            "event": "page_failed",
            "level": "error",
            "kind": kind,
            "subject": subject,
            "page": page,
            "error_kind": error_kind,
            "message": message[:500],
        })

    def exhausted(self, kind: str, subject: str, page: int, total: int) -> None:
        self._write({
            "event": "exhausted",
            "kind": kind,
            "subject": subject,
            "page": page,
            "total": total,
        })

    def stale_discarded(self, kind: str, subject: str, page: int) -> None:
        if self.level < 2:
            return
        self._write({
            "event": "stale_discarded",
            "level": "debug",
            "kind": kind,
            "subject": subject,
            "page": page,
        })

    def rebind(self, kind: str, old_subject: Optional[str], new_subject: str, cancelled: bool) -> None:
        self._write({
            "event": "rebind",
            "kind": kind,
            "old_subject": old_subject,
            "new_subject": new_subject,
            "cancelled_inflight": cancelled,
        })

    def error(self, op: str, err: str) -> None:
        self._write({"event": "error", "level": "error", "op": op, "err": err[:500]})


_logger: Optional[DebugLogger] = None


def get_logger() -> DebugLogger:
    """Return the process-wide logger, creating it on first use."""
    global _logger
    if _logger is None:
        _logger = DebugLogger()
    return _logger


def reset_logger() -> None:
    """Drop the cached logger so the next get_logger() re-reads env/paths."""
    global _logger
    _logger = None
