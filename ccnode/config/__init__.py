"""Configuration management.

This module handles loading the node configuration from defaults, the
configuration file, the environment and the command line.
"""

from __future__ import annotations

from ccnode.config.loader import (
    ConfigLoader,
    EarlyExit,
    ExitKind,
    NodeContext,
    load_config,
    load_config_file,
)
from ccnode.config.validation import ValidationResult, validate

__all__ = [
    "ConfigLoader",
    "EarlyExit",
    "ExitKind",
    "NodeContext",
    "ValidationResult",
    "load_config",
    "load_config_file",
    "validate",
]
