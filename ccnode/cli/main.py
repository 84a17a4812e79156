"""ccNode daemon entry point.

Loads the configuration, reports configuration errors the way the daemon
always has (message, then usage) and sets up logging for a successful start.
"""

from __future__ import annotations

import logging
import sys
from typing import Sequence

from rich.console import Console

from ccnode.config.loader import ConfigLoader, EarlyExit, ExitKind
from ccnode.service import ServiceHook
from ccnode.utils.exceptions import ConfigurationError
from ccnode.utils.logging_config import get_subsystem_logger, setup_logging
from ccnode.utils.version import get_version

logger = logging.getLogger(__name__)


def _print_early_exit(result: EarlyExit, console: Console, err_console: Console) -> None:
    if not result.message:
        return
    # Service command failures are reported on stderr.
    target = err_console if result.kind is ExitKind.SERVICE else console
    target.print(result.message, markup=False, highlight=False, soft_wrap=True)


def main(
    argv: Sequence[str] | None = None,
    service_hook: ServiceHook | None = None,
    prog_name: str | None = None,
    console: Console | None = None,
    err_console: Console | None = None,
) -> int:
    """Load the configuration and start logging.

    Returns:
        Process exit code

    """
    console = console or Console()
    err_console = err_console or Console(stderr=True)
    loader = ConfigLoader(prog_name=prog_name, service_hook=service_hook)

    try:
        result = loader.load(argv)
    except ConfigurationError as e:
        err_console.print(str(e), style="red", markup=False, highlight=False, soft_wrap=True)
        if e.show_usage:
            err_console.print(loader.usage(), markup=False, highlight=False, soft_wrap=True)
        return 1

    if isinstance(result, EarlyExit):
        _print_early_exit(result, console, err_console)
        return result.exit_code

    config = result.config
    log_path = setup_logging(config.log_dir, result.log_levels, console=console)

    # Deferred until logging is up.
    for warning in result.warnings:
        logger.warning("%s", warning)

    node_log = get_subsystem_logger("CCND")
    node_log.info("Version %s", get_version())
    node_log.info("Active network: %s", result.params.name)
    node_log.debug("Logging to %s", log_path)
    if config.disable_rpc:
        node_log.info("RPC server disabled")
    else:
        node_log.info("RPC listeners: %s", ", ".join(config.rpc_listeners))
    if not config.disable_listen:
        node_log.info("Listening on %s", ", ".join(config.listeners))
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
