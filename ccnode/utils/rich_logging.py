"""Rich logging integration for ccNode.

Provides the Rich-based console handler and a plain formatter for log files.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


def subsystem_tag(logger_name: str) -> str:
    """Return the upper-case subsystem tag of a ``ccnode.<tag>`` logger."""
    parts = logger_name.split(".")
    if len(parts) == 2 and parts[0] == "ccnode" and parts[1].isalpha():
        return parts[1].upper()
    return ""


class SubsystemRichHandler(RichHandler):
    """RichHandler that prefixes messages with the subsystem tag.

    Subsystem loggers are named ``ccnode.<tag>``; the tag is shown upper-cased
    in front of the message, e.g. ``[PEER] New valid peer``. Markup is off so
    bracketed values in messages are printed verbatim.
    """

    def render_message(self, record: logging.LogRecord, message: str) -> Any:
        """Prefix the rendered message with the subsystem tag."""
        tag = subsystem_tag(record.name)
        if tag:
            message = f"[{tag}] {message}"
        return super().render_message(record, message)


class FileFormatter(logging.Formatter):
    """Formatter for log files that exposes ``%(subsystem)s``."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with its subsystem tag."""
        record.subsystem = subsystem_tag(record.name) or "-"
        return super().format(record)


def create_rich_handler(
    console: Console | None = None,
    level: int = logging.INFO,
    show_path: bool = False,
    rich_tracebacks: bool = True,
) -> logging.Handler:
    """Create a RichHandler for console output.

    Args:
        console: Optional Rich Console instance
        level: Log level
        show_path: Whether to show file paths in log output
        rich_tracebacks: Whether to use rich tracebacks

    Returns:
        Configured RichHandler instance

    """
    if console is None:
        console = Console(file=sys.stdout)

    return SubsystemRichHandler(
        console=console,
        level=level,
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
        markup=False,
    )
