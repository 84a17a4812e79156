"""Exception hierarchy for ccNode.

Provides the errors raised while resolving the node configuration and while
routing outbound connections.
"""

from __future__ import annotations

from typing import Any


class CCNodeError(Exception):
    """Base exception for all ccNode errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize ccNode error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ConfigurationError(CCNodeError):
    """Fatal configuration errors.

    ``show_usage`` tells the entry point whether the command usage should be
    printed after the message.
    """

    show_usage: bool = True


class ConfigFileError(ConfigurationError):
    """Malformed configuration file (syntax, unknown key, bad value)."""


class CommandLineError(ConfigurationError):
    """Malformed command line."""


class ConfigValidationError(ConfigurationError):
    """A resolved field violates a configuration rule."""


class HostResolutionError(ConfigurationError):
    """Host lookup performed at startup failed."""

    show_usage = False


class NetworkError(CCNodeError):
    """Network-related errors."""


class AddressError(CCNodeError):
    """Payout address decoding errors."""


class HomeDirectoryError(ConfigurationError):
    """The application home directory could not be created."""

    show_usage = False
