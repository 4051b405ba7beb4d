# SPDX-License-Identifier: MIT
"""ghlens - terminal viewer for public GitHub user activity."""

from ghlens._version import __version__

__all__ = ["__version__"]
