# SPDX-License-Identifier: MIT
"""Centralized path resolution for ghlens.

All path resolution should go through this module to ensure consistency.
"""
import os
from pathlib import Path


class PathResolver:
    """Resolves paths for ghlens components."""

    @staticmethod
    def config_dir() -> Path:
        """Get the directory holding settings.json.

        Resolution order:
        1. GHLENS_CONFIG env var
        2. XDG_CONFIG_HOME/ghlens
        3. ~/.config/ghlens
        """
        explicit = os.environ.get("GHLENS_CONFIG")
        if explicit:
            return Path(explicit)
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config) / "ghlens"
        return Path.home() / ".config" / "ghlens"

    @staticmethod
    def state_dir() -> Path:
        """Get the state directory for mutable data (debug log).

        Resolution order:
        1. GHLENS_STATE env var
        2. XDG_STATE_HOME/ghlens
        3. ~/.local/state/ghlens
        """
        state = os.environ.get("GHLENS_STATE")
        if state:
            return Path(state)
        xdg_state = os.environ.get("XDG_STATE_HOME")
        if xdg_state:
            return Path(xdg_state) / "ghlens"
        return Path.home() / ".local" / "state" / "ghlens"

    @staticmethod
    def debug_log() -> Path:
        """Get the path of the JSON-lines debug log."""
        return PathResolver.state_dir() / "debug.log"
