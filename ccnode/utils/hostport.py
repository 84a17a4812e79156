"""``host:port`` splitting and joining.

IPv6 hosts are written in brackets whenever a port is attached, so
``[::1]:8333`` splits into ``::1`` and ``8333``.
"""

from __future__ import annotations


def split_host_port(address: str) -> tuple[str, str]:
    """Split ``host:port`` or ``[host]:port`` into host and port.

    IPv6 hosts must be bracketed when a port is present.

    Raises:
        ValueError: If the address carries no port or is malformed

    """
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            msg = f"missing ']' in address {address!r}"
            raise ValueError(msg)
        host, rest = address[1:end], address[end + 1 :]
        if not rest:
            msg = f"missing port in address {address!r}"
            raise ValueError(msg)
        if not rest.startswith(":") or ":" in rest[1:]:
            msg = f"unexpected text after host in address {address!r}"
            raise ValueError(msg)
        return host, rest[1:]

    host, sep, port = address.rpartition(":")
    if not sep:
        msg = f"missing port in address {address!r}"
        raise ValueError(msg)
    if ":" in host:
        msg = f"too many colons in address {address!r}"
        raise ValueError(msg)
    if "[" in host or "]" in host:
        msg = f"unexpected bracket in address {address!r}"
        raise ValueError(msg)
    return host, port


def join_host_port(host: str, port: str | int) -> str:
    """Join host and port, bracketing IPv6 hosts."""
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def host_of(address: str) -> str:
    """Return the host part of ``address``, or the whole string without a port."""
    try:
        host, _ = split_host_port(address)
    except ValueError:
        return address.strip("[]")
    return host
