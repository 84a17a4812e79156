"""Service command hook.

Installing, removing, starting and stopping the node as an OS service is
platform specific and lives outside this package. Embedders pass a
``ServiceHook`` to the loader; when one is given the ``--service`` option is
offered and the hook runs before any configuration is loaded.
"""

from __future__ import annotations

from typing import Callable, Final

SERVICE_COMMANDS: Final[tuple[str, ...]] = ("install", "remove", "start", "stop")

# Runs one service command; raises on failure.
ServiceHook = Callable[[str], None]


def run_service_hook(hook: ServiceHook, command: str) -> str:
    """Run ``hook`` for ``command`` and return an error message, if any.

    Unknown commands are rejected without calling the hook. Any exception from
    the hook is reported as a message rather than propagated; the process
    exits successfully either way.
    """
    if command not in SERVICE_COMMANDS:
        return (
            f"The specified service command [{command}] is invalid -- "
            f"supported commands [{', '.join(SERVICE_COMMANDS)}]"
        )
    try:
        hook(command)
    except Exception as e:  # noqa: BLE001 - reported to the user
        return str(e)
    return ""
