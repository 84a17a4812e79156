"""Validation of the merged configuration.

The checks run in a fixed order and the first failure aborts with a
``ConfigValidationError`` naming the offending option. A few derived values
(default listeners, RPC enablement, block size clamping) are filled in between
the checks because later checks depend on them.
"""

from __future__ import annotations

import logging
import re
import socket
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, MutableMapping

from ccnode.address import Address, decode_address
from ccnode.config.addresses import join_host_port
from ccnode.config.defaults import BLOCK_MAX_SIZE_MAX, BLOCK_MAX_SIZE_MIN, SUPPORTED_DB_TYPES
from ccnode.config.options import format_duration
from ccnode.netparams import NetworkProfile
from ccnode.utils.exceptions import AddressError, ConfigValidationError, HostResolutionError
from ccnode.utils.logging_config import DebugLevels, parse_debug_levels

logger = logging.getLogger(__name__)

PROFILE_PORT_MIN = 1024
PROFILE_PORT_MAX = 65535
MIN_BAN_DURATION = timedelta(seconds=1)

_INTEGER = re.compile(r"[+-]?\d+")

HostLookup = Callable[[str], list[str]]


def lookup_host(host: str) -> list[str]:
    """Resolve ``host`` with the system resolver.

    Returns:
        Distinct addresses in resolver order

    Raises:
        HostResolutionError: If the lookup fails

    """
    try:
        infos = socket.getaddrinfo(host, None, type=socket.SOCK_STREAM)
    except OSError as e:
        msg = f"Failed to resolve {host}: {e}"
        raise HostResolutionError(msg) from e
    return list(dict.fromkeys(str(info[4][0]) for info in infos))


@dataclass(frozen=True)
class ValidationResult:
    """Values derived while validating."""

    log_levels: DebugLevels
    mining_addresses: tuple[Address, ...]


def check_debug_level(values: MutableMapping[str, Any]) -> DebugLevels:
    """Parse the debug level option."""
    return parse_debug_levels(values["debug_level"])


def check_db_type(values: MutableMapping[str, Any]) -> None:
    """The database backend must be a supported one."""
    db_type = values["db_type"]
    if db_type not in SUPPORTED_DB_TYPES:
        msg = (
            f"The specified database type [{db_type}] is invalid -- "
            f"supported types [{', '.join(SUPPORTED_DB_TYPES)}]"
        )
        raise ConfigValidationError(msg)


def check_profile_port(values: MutableMapping[str, Any]) -> None:
    """A profiling port, when given, must be in [1024, 65535]."""
    profile = values["profile"]
    if not profile:
        return
    if (
        not _INTEGER.fullmatch(profile)
        or not PROFILE_PORT_MIN <= int(profile) <= PROFILE_PORT_MAX
    ):
        msg = (
            f"The profile port must be between {PROFILE_PORT_MIN} and "
            f"{PROFILE_PORT_MAX} -- parsed [{profile}]"
        )
        raise ConfigValidationError(msg)


def check_ban_duration(values: MutableMapping[str, Any]) -> None:
    """Ban durations shorter than one second are rejected."""
    ban_duration: timedelta = values["ban_duration"]
    if ban_duration < MIN_BAN_DURATION:
        msg = (
            "The banduration option may not be less than 1s -- "
            f"parsed [{format_duration(ban_duration)}]"
        )
        raise ConfigValidationError(msg)


def check_peer_lists(values: MutableMapping[str, Any]) -> None:
    """--addpeer and --connect do not mix."""
    if values["add_peers"] and values["connect_peers"]:
        msg = "The --addpeer and --connect options can not be mixed"
        raise ConfigValidationError(msg)


def apply_listener_defaults(values: MutableMapping[str, Any], profile: NetworkProfile) -> None:
    """Derive listening and seeding behaviour from the peer options."""
    # --proxy or --connect without --listen disables listening.
    if (values["proxy"] or values["connect_peers"]) and not values["listeners"]:
        values["disable_listen"] = True

    if values["connect_peers"]:
        values["disable_dns_seed"] = True

    # All interfaces on the network's port.
    if not values["listeners"]:
        values["listeners"] = [join_host_port("", profile.default_port)]


def apply_rpc_defaults(
    values: MutableMapping[str, Any],
    profile: NetworkProfile,
    lookup: HostLookup = lookup_host,
) -> None:
    """Disable RPC without credentials; default it to localhost otherwise."""
    if not values["rpc_user"] or not values["rpc_pass"]:
        values["disable_rpc"] = True

    if not values["disable_rpc"] and not values["rpc_listeners"]:
        addrs = lookup("localhost")
        values["rpc_listeners"] = [join_host_port(addr, profile.rpc_port) for addr in addrs]
        logger.debug("Defaulting RPC listeners to %s", values["rpc_listeners"])


def check_block_sizes(values: MutableMapping[str, Any]) -> None:
    """Bound the maximum block size and clamp the others below it.

    The priority size is clamped to the maximum and the minimum size to the
    priority size.
    """
    block_max_size = values["block_max_size"]
    if not BLOCK_MAX_SIZE_MIN <= block_max_size <= BLOCK_MAX_SIZE_MAX:
        msg = (
            f"The blockmaxsize option must be in between {BLOCK_MAX_SIZE_MIN} "
            f"and {BLOCK_MAX_SIZE_MAX} -- parsed [{block_max_size}]"
        )
        raise ConfigValidationError(msg)

    # min <= priority <= max
    values["block_priority_size"] = min(values["block_priority_size"], block_max_size)
    values["block_min_size"] = min(values["block_min_size"], values["block_priority_size"])


def decode_mining_addresses(
    values: MutableMapping[str, Any], profile: NetworkProfile
) -> list[Address]:
    """Decode every getwork payout address for the active network."""
    addresses: list[Address] = []
    for encoded in values["getwork_keys"]:
        try:
            addr = decode_address(encoded)
        except AddressError as e:
            msg = f"The specified getworkkey '{encoded}' failed to decode: {e}"
            raise ConfigValidationError(msg) from e
        if not addr.is_for_net(profile):
            msg = f"The specified getworkkey '{encoded}' is on the wrong network"
            raise ConfigValidationError(msg)
        addresses.append(addr)
    return addresses


def validate(
    values: MutableMapping[str, Any],
    profile: NetworkProfile,
    lookup: HostLookup = lookup_host,
) -> ValidationResult:
    """Run every check in order, updating ``values`` in place.

    Raises:
        ConfigValidationError: On the first failed check
        HostResolutionError: If the default RPC listeners cannot be resolved

    """
    log_levels = check_debug_level(values)
    check_db_type(values)
    check_profile_port(values)
    check_ban_duration(values)
    check_peer_lists(values)
    apply_listener_defaults(values, profile)
    apply_rpc_defaults(values, profile, lookup)
    check_block_sizes(values)
    mining_addresses = decode_mining_addresses(values, profile)
    return ValidationResult(log_levels=log_levels, mining_addresses=tuple(mining_addresses))
