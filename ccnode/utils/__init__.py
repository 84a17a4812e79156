"""Shared utilities and infrastructure.

This module contains the error hierarchy and the logging and version helpers
used throughout the application.
"""

from __future__ import annotations

from ccnode.utils.exceptions import (
    AddressError,
    CCNodeError,
    CommandLineError,
    ConfigFileError,
    ConfigurationError,
    ConfigValidationError,
    HomeDirectoryError,
    HostResolutionError,
    NetworkError,
)
from ccnode.utils.logging_config import parse_debug_levels, setup_logging
from ccnode.utils.version import get_version

__all__ = [
    # Exceptions
    "AddressError",
    "CCNodeError",
    "CommandLineError",
    "ConfigFileError",
    "ConfigValidationError",
    "ConfigurationError",
    "HomeDirectoryError",
    "HostResolutionError",
    "NetworkError",
    # Logging
    "parse_debug_levels",
    "setup_logging",
    # Version
    "get_version",
]
