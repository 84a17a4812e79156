"""Listener and peer address list normalization."""

from __future__ import annotations

from typing import Iterable

from ccnode.utils.hostport import host_of, join_host_port, split_host_port

__all__ = [
    "host_of",
    "join_host_port",
    "normalize_address",
    "normalize_addresses",
    "remove_duplicate_addresses",
    "split_host_port",
]


def normalize_address(address: str, default_port: str) -> str:
    """Return ``address`` with ``default_port`` appended when it has no port.

    A bracketed IPv6 host without a port (``[::1]``) gets the port inside the
    usual brackets, not a second pair.
    """
    try:
        split_host_port(address)
    except ValueError:
        host = address
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        return join_host_port(host, default_port)
    return address


def remove_duplicate_addresses(addresses: Iterable[str]) -> list[str]:
    """Return the addresses with duplicates removed, keeping first-seen order."""
    return list(dict.fromkeys(addresses))


def normalize_addresses(addresses: Iterable[str], default_port: str) -> list[str]:
    """Port-annotate every address, then drop duplicates.

    Normalizing an already normalized list returns it unchanged.
    """
    return remove_duplicate_addresses(
        normalize_address(addr, default_port) for addr in addresses
    )
