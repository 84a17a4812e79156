"""SOCKS5 transport helpers.

Outbound connections through a SOCKS5 proxy use python-socks with remote name
resolution. Name lookups through tor use tor's SOCKS5 RESOLVE extension
(command ``0xF0``), which python-socks does not speak, so that exchange is
done directly over asyncio streams.
"""

from __future__ import annotations

import asyncio
import ipaddress
import logging
from urllib.parse import quote

from python_socks import ProxyConnectionError as SocksConnectionError
from python_socks import ProxyError as SocksError
from python_socks import ProxyTimeoutError as SocksTimeoutError
from python_socks.async_.asyncio import Proxy

from ccnode.proxy.exceptions import (
    ProxyAuthError,
    ProxyConnectionError,
    ProxyTimeoutError,
    TorLookupError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

SOCKS_VERSION = 0x05
AUTH_NONE = 0x00
CMD_TOR_RESOLVE = 0xF0
ATYP_IPV4 = 0x01
ATYP_DOMAIN = 0x03
ATYP_IPV6 = 0x04

# Reply codes 0x00-0x08 of a SOCKS5 reply, as reported by tor.
TOR_STATUS_ERRORS: tuple[str, ...] = (
    "tor succeeded",
    "tor general error",
    "tor not allowed",
    "tor network is unreachable",
    "tor host is unreachable",
    "tor connection refused",
    "tor TTL expired",
    "tor command not supported",
    "tor address type not supported",
)


def proxy_url(host: str, port: int, username: str = "", password: str = "") -> str:
    """Build a ``socks5://`` URL for python-socks."""
    if ":" in host:
        host = f"[{host}]"
    if username or password:
        auth = f"{quote(username, safe='')}:{quote(password, safe='')}@"
        return f"socks5://{auth}{host}:{port}"
    return f"socks5://{host}:{port}"


async def socks_connect(
    proxy_host: str,
    proxy_port: int,
    dest_host: str,
    dest_port: int,
    username: str = "",
    password: str = "",
    timeout: float = DEFAULT_TIMEOUT,
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """Open a stream to ``dest_host:dest_port`` through a SOCKS5 proxy.

    The destination name is resolved by the proxy.

    Args:
        proxy_host: Proxy hostname
        proxy_port: Proxy port
        dest_host: Destination hostname or address
        dest_port: Destination port
        username: Optional proxy username
        password: Optional proxy password
        timeout: Connection timeout

    Returns:
        Tuple of (reader, writer) for the tunnelled connection

    Raises:
        ProxyTimeoutError: If the proxy does not answer in time
        ProxyAuthError: If the proxy rejects the credentials
        ProxyConnectionError: On any other proxy failure

    """
    proxy = Proxy.from_url(
        proxy_url(proxy_host, proxy_port, username, password), rdns=True
    )
    try:
        sock = await proxy.connect(dest_host=dest_host, dest_port=dest_port, timeout=timeout)
    except SocksTimeoutError as err:
        msg = f"Timeout connecting to {dest_host}:{dest_port} via proxy {proxy_host}:{proxy_port}"
        raise ProxyTimeoutError(msg) from err
    except SocksError as e:
        msg = f"Proxy {proxy_host}:{proxy_port} refused {dest_host}:{dest_port}: {e}"
        if (username or password) and "authentication" in str(e).lower():
            raise ProxyAuthError(msg) from e
        raise ProxyConnectionError(msg) from e
    except (SocksConnectionError, OSError) as e:
        msg = f"Failed to connect to proxy {proxy_host}:{proxy_port}: {e}"
        raise ProxyConnectionError(msg) from e

    try:
        return await asyncio.open_connection(sock=sock)
    except OSError as e:
        sock.close()
        msg = f"Failed to open stream via proxy {proxy_host}:{proxy_port}: {e}"
        raise ProxyConnectionError(msg) from e


def _resolve_request(host: str) -> bytes:
    try:
        encoded = host.encode("ascii") if host.isascii() else host.encode("idna")
    except UnicodeError as e:
        msg = f"invalid hostname for tor lookup: {host}"
        raise TorLookupError(msg) from e
    if len(encoded) > 255:
        msg = f"hostname too long for tor lookup: {host}"
        raise TorLookupError(msg)
    return (
        bytes([SOCKS_VERSION, CMD_TOR_RESOLVE, 0x00, ATYP_DOMAIN, len(encoded)])
        + encoded
        + b"\x00\x00"
    )


async def _tor_resolve_exchange(
    reader: asyncio.StreamReader, writer: asyncio.StreamWriter, host: str
) -> list[ipaddress.IPv4Address | ipaddress.IPv6Address]:
    # Greeting: version 5, one method, no authentication.
    writer.write(bytes([SOCKS_VERSION, 0x01, AUTH_NONE]))
    await writer.drain()

    greeting = await reader.readexactly(2)
    if greeting[0] != SOCKS_VERSION:
        msg = "invalid proxy response"
        raise TorLookupError(msg)
    if greeting[1] != AUTH_NONE:
        msg = "invalid proxy authentication method"
        raise TorLookupError(msg)

    writer.write(_resolve_request(host))
    await writer.drain()

    reply = await reader.readexactly(4)
    if reply[0] != SOCKS_VERSION:
        msg = "invalid proxy response"
        raise TorLookupError(msg)
    if reply[1] != 0x00:
        if reply[1] >= len(TOR_STATUS_ERRORS):
            msg = "invalid proxy response"
            raise TorLookupError(msg)
        raise TorLookupError(TOR_STATUS_ERRORS[reply[1]])

    if reply[3] == ATYP_IPV4:
        return [ipaddress.IPv4Address(await reader.readexactly(4))]
    if reply[3] == ATYP_IPV6:
        return [ipaddress.IPv6Address(await reader.readexactly(16))]
    msg = "invalid address response"
    raise TorLookupError(msg)


async def tor_lookup(
    host: str,
    proxy_host: str,
    proxy_port: int,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[ipaddress.IPv4Address | ipaddress.IPv6Address]:
    """Resolve ``host`` through tor's SOCKS5 RESOLVE extension.

    Raises:
        ProxyTimeoutError: If the proxy does not answer in time
        ProxyConnectionError: If the proxy cannot be reached
        TorLookupError: If tor reports an error or answers malformed data

    """
    try:
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(proxy_host, proxy_port),
            timeout=timeout,
        )
    except asyncio.TimeoutError as err:
        msg = f"Timeout connecting to proxy {proxy_host}:{proxy_port}"
        raise ProxyTimeoutError(msg) from err
    except OSError as e:
        msg = f"Failed to connect to proxy {proxy_host}:{proxy_port}: {e}"
        raise ProxyConnectionError(msg) from e

    try:
        addrs = await asyncio.wait_for(
            _tor_resolve_exchange(reader, writer, host), timeout=timeout
        )
    except asyncio.TimeoutError as err:
        msg = f"Timeout resolving {host} via proxy {proxy_host}:{proxy_port}"
        raise ProxyTimeoutError(msg) from err
    except asyncio.IncompleteReadError as err:
        msg = "invalid proxy response"
        raise TorLookupError(msg) from err
    finally:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            logger.debug("Error closing tor lookup connection", exc_info=True)

    logger.debug("Resolved %s via tor: %s", host, addrs)
    return addrs
