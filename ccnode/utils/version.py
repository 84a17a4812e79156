"""Version management utilities for ccNode.

This module provides functions to:
- Retrieve the installed package version using importlib
- Format the version banner printed by ``--version``
"""

from __future__ import annotations

import importlib.metadata
import os


def get_version() -> str:
    """Get the installed package version.

    Uses importlib.metadata to get version from installed package.
    Falls back to ccnode.__version__ if metadata is unavailable.

    Returns:
        Version string (e.g., "0.1.0")
    """
    try:
        return importlib.metadata.version("ccnode")
    except importlib.metadata.PackageNotFoundError:
        import ccnode

        return getattr(ccnode, "__version__", "0.0.1")


def app_name_from_argv0(argv0: str) -> str:
    """Return the executable name without directory or extension."""
    name = os.path.basename(argv0)
    return os.path.splitext(name)[0] or "ccnoded"


def format_version_banner(app_name: str, version: str | None = None) -> str:
    """Format the ``<app> version <x.y.z>`` banner.

    Args:
        app_name: Executable name
        version: Version string. If None, uses get_version().

    Returns:
        Banner string (e.g., "ccnoded version 0.1.0")
    """
    if version is None:
        version = get_version()
    return f"{app_name} version {version}"
