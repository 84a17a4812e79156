"""Logging configuration for ccNode.

Provides the per-subsystem loggers, the ``--debuglevel`` grammar and the
handler setup (Rich console plus rotating log file).
"""

from __future__ import annotations

import logging
import logging.config
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from rich.console import Console

from ccnode.utils.exceptions import ConfigValidationError
from ccnode.utils.rich_logging import FileFormatter, create_rich_handler

TRACE: Final[int] = 5
logging.addLevelName(TRACE, "TRACE")

DEFAULT_LOG_LEVEL: Final[str] = "info"
DEFAULT_LOG_FILENAME: Final[str] = "ccnode.log"

# Level names accepted by --debuglevel mapped to stdlib levels.
LOG_LEVELS: Final[dict[str, int]] = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

# Subsystem tag -> logger name.
SUBSYSTEM_LOGGERS: Final[dict[str, str]] = {
    "ADXR": "ccnode.adxr",
    "BCDB": "ccnode.bcdb",
    "BMGR": "ccnode.bmgr",
    "CCND": "ccnode.ccnd",
    "CHAN": "ccnode.chan",
    "DISC": "ccnode.disc",
    "PEER": "ccnode.peer",
    "RPCS": "ccnode.rpcs",
    "SCRP": "ccnode.scrp",
    "SRVR": "ccnode.srvr",
    "TXMP": "ccnode.txmp",
}


def valid_log_level(level: str) -> bool:
    """Return whether ``level`` is a recognized debug level name."""
    return level in LOG_LEVELS


def supported_subsystems() -> list[str]:
    """Return the sorted list of subsystem tags."""
    return sorted(SUBSYSTEM_LOGGERS)


def format_subsystems() -> str:
    """Return the sorted subsystem tags as ``[A, B, ...]``."""
    return "[" + ", ".join(supported_subsystems()) + "]"


def get_subsystem_logger(subsystem: str) -> logging.Logger:
    """Get the logger of a subsystem tag such as ``PEER``."""
    return logging.getLogger(SUBSYSTEM_LOGGERS[subsystem])


def set_log_level(subsystem: str, level: str) -> None:
    """Set the level of one subsystem logger.

    Unknown subsystems are ignored; callers validate beforehand.
    """
    name = SUBSYSTEM_LOGGERS.get(subsystem)
    if name is None or level not in LOG_LEVELS:
        return
    logging.getLogger(name).setLevel(LOG_LEVELS[level])


def set_log_levels(level: str) -> None:
    """Set every subsystem logger (and the ``ccnode`` parent) to ``level``."""
    if level not in LOG_LEVELS:
        return
    logging.getLogger("ccnode").setLevel(LOG_LEVELS[level])
    for subsystem in SUBSYSTEM_LOGGERS:
        set_log_level(subsystem, level)


@dataclass(frozen=True)
class DebugLevels:
    """Parsed ``--debuglevel`` value.

    Either ``all_level`` is set (one level for every subsystem) or
    ``subsystems`` holds ``(tag, level)`` pairs in the order given.
    """

    all_level: str | None = None
    subsystems: tuple[tuple[str, str], ...] = ()

    def apply(self) -> None:
        """Push the levels into the logging subsystem."""
        if self.all_level is not None:
            set_log_levels(self.all_level)
        for subsystem, level in self.subsystems:
            set_log_level(subsystem, level)


def parse_debug_levels(debug_level: str) -> DebugLevels:
    """Parse a ``--debuglevel`` value.

    Accepts either a single level name (``info``) or a comma-separated list of
    ``<subsystem>=<level>`` pairs (``PEER=debug,SRVR=trace``).

    Raises:
        ConfigValidationError: On an unknown level, a malformed pair or an
            unknown subsystem.

    """
    if "," not in debug_level and "=" not in debug_level:
        if not valid_log_level(debug_level):
            msg = f"The specified debug level [{debug_level}] is invalid"
            raise ConfigValidationError(msg)
        return DebugLevels(all_level=debug_level)

    pairs: list[tuple[str, str]] = []
    for pair in debug_level.split(","):
        if "=" not in pair:
            msg = (
                "The specified debug level contains an invalid "
                f"subsystem/level pair [{pair}]"
            )
            raise ConfigValidationError(msg)

        subsystem, level = pair.split("=", 1)
        if subsystem not in SUBSYSTEM_LOGGERS:
            msg = (
                f"The specified subsystem [{subsystem}] is invalid -- "
                f"supported subsystems {format_subsystems()}"
            )
            raise ConfigValidationError(msg)
        if not valid_log_level(level):
            msg = f"The specified debug level [{level}] is invalid"
            raise ConfigValidationError(msg)
        pairs.append((subsystem, level))

    return DebugLevels(subsystems=tuple(pairs))


def setup_logging(
    log_dir: str | Path,
    levels: DebugLevels | None = None,
    console: Console | None = None,
    log_filename: str = DEFAULT_LOG_FILENAME,
) -> Path:
    """Set up console and file logging.

    The console gets a Rich handler; ``<log_dir>/<log_filename>`` gets a
    rotating file handler. Handlers pass everything through and the logger
    levels decide, so ``levels`` can differ per subsystem.

    Returns:
        Path of the log file

    """
    log_path = Path(log_dir) / log_filename
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "()": FileFormatter,
                "format": "%(asctime)s [%(levelname)s] %(subsystem)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": TRACE,
                "formatter": "simple",
                "filename": str(log_path),
                "maxBytes": 10 * 1024 * 1024,  # 10MB
                "backupCount": 5,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            "ccnode": {
                "level": LOG_LEVELS[DEFAULT_LOG_LEVEL],
                "handlers": ["file"],
                "propagate": False,
            },
        },
    }
    logging.config.dictConfig(logging_config)

    ccnode_logger = logging.getLogger("ccnode")
    ccnode_logger.addHandler(create_rich_handler(console=console, level=TRACE))

    set_log_levels(DEFAULT_LOG_LEVEL)
    if levels is not None:
        levels.apply()
    return log_path
