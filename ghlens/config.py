# SPDX-License-Identifier: MIT
"""Configuration reader for ghlens.

Settings live in a JSON file addressed with dot-notation keys
(e.g. "api.perPage"). A handful of environment variables override
the file so the viewer can be pointed at another API host from a shell.
"""
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ghlens._version import __version__
from ghlens.paths import PathResolver

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_PER_PAGE = 30
MAX_PER_PAGE = 100  # GitHub rejects larger pages
DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = f"ghlens/{__version__}"


def get_settings_path() -> Path:
    """Get path to settings.json.

    Returns:
        Path to settings.json, respecting GHLENS_SETTINGS env var.
    """
    custom = os.environ.get("GHLENS_SETTINGS")
    if custom:
        return Path(custom)
    return PathResolver.config_dir() / "settings.json"


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value by dot-notation key.

    Args:
        key: Dot-notation key like "api.perPage"
        default: Default value if key not found

    Returns:
        Setting value or default
    """
    settings_path = get_settings_path()

    if not settings_path.exists():
        return default

    try:
        with open(settings_path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError):
        return default

    parts = key.split(".")
    current = data
    for part in parts:
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]

    return current


def get_bool_setting(key: str, default: bool = False) -> bool:
    """Get a boolean setting. Strings "true", "1", "yes" count as True."""
    value = get_setting(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes")
    return bool(value)


def get_int_setting(key: str, default: int = 0) -> int:
    """Get an integer setting, falling back to default if conversion fails."""
    value = get_setting(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def get_float_setting(key: str, default: float = 0.0) -> float:
    """Get a float setting, falling back to default if conversion fails."""
    value = get_setting(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class ViewerConfig:
    """Resolved settings for the API client."""

    api_url: str = DEFAULT_API_URL
    per_page: int = DEFAULT_PER_PAGE
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT


def load_config() -> ViewerConfig:
    """Build a ViewerConfig from settings.json and environment overrides.

    Resolution order for each field: env var, settings.json, default.
    """
    api_url = os.environ.get("GHLENS_API_URL") or get_setting("api.url", DEFAULT_API_URL)
    per_page = get_int_setting("api.perPage", DEFAULT_PER_PAGE)
    per_page = max(1, min(per_page, MAX_PER_PAGE))
    timeout = get_float_setting("api.timeout", DEFAULT_TIMEOUT)
    if timeout <= 0:
        timeout = DEFAULT_TIMEOUT
    user_agent = get_setting("api.userAgent", DEFAULT_USER_AGENT)

    return ViewerConfig(
        api_url=str(api_url).rstrip("/"),
        per_page=per_page,
        timeout=timeout,
        user_agent=str(user_agent),
    )
