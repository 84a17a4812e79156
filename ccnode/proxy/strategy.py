"""Dial and lookup strategies.

A strategy knows how to open an outbound stream and how to resolve a host
name under one proxy setup. Two strategies are chosen once at startup: one
for ordinary destinations and one for tor hidden services (``.onion``).
``NetworkRouter`` dispatches every call to the right one.
"""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import socket
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Union

from ccnode.proxy.exceptions import ProxyConfigurationError, TorDisabledError
from ccnode.proxy.socks import DEFAULT_TIMEOUT, socks_connect, tor_lookup
from ccnode.utils.exceptions import NetworkError
from ccnode.utils.hostport import host_of, split_host_port

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
Streams = tuple[asyncio.StreamReader, asyncio.StreamWriter]

ONION_SUFFIX = ".onion"

_NETWORK_FAMILIES: dict[str, int] = {
    "tcp": socket.AF_UNSPEC,
    "tcp4": socket.AF_INET,
    "tcp6": socket.AF_INET6,
}


class StrategyKind(str, Enum):
    """How a strategy reaches its destinations."""

    DIRECT = "direct"
    PROXIED = "proxied"
    ONION_PROXIED = "onion_proxied"
    ONION_DISABLED = "onion_disabled"


def _split_destination(address: str) -> tuple[str, int]:
    try:
        host, port = split_host_port(address)
        return host, int(port)
    except ValueError as e:
        msg = f"Invalid destination address {address!r}: {e}"
        raise NetworkError(msg) from e


def _family(network: str) -> int:
    try:
        return _NETWORK_FAMILIES[network]
    except KeyError:
        msg = f"Unsupported network {network!r}"
        raise NetworkError(msg) from None


def is_onion(address: str) -> bool:
    """Return whether ``address`` (host or host:port) is a tor hidden service."""
    return host_of(address).lower().endswith(ONION_SUFFIX)


@dataclass(frozen=True)
class ProxyEndpoint:
    """A SOCKS5 proxy address and its credentials."""

    address: str
    username: str = ""
    password: str = ""

    @property
    def host(self) -> str:
        return self._split()[0]

    @property
    def port(self) -> int:
        return self._split()[1]

    def _split(self) -> tuple[str, int]:
        try:
            host, port = split_host_port(self.address)
            return host, int(port)
        except ValueError as e:
            msg = f"Invalid proxy address {self.address!r}: {e}"
            raise ProxyConfigurationError(msg) from e

    def __repr__(self) -> str:
        """Hide the password."""
        return f"ProxyEndpoint(address={self.address!r}, username={self.username!r})"


class Strategy(ABC):
    """Dial and lookup behaviour for one class of destinations."""

    kind: StrategyKind

    @abstractmethod
    async def connect(self, network: str, address: str) -> Streams:
        """Open a stream to ``address`` (``host:port``) over ``network``."""

    @abstractmethod
    async def resolve(self, host: str) -> list[IPAddress]:
        """Resolve ``host`` to its IP addresses."""


class DirectStrategy(Strategy):
    """System sockets and the system resolver."""

    kind = StrategyKind.DIRECT

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    async def connect(self, network: str, address: str) -> Streams:
        family = _family(network)
        host, port = _split_destination(address)
        return await asyncio.wait_for(
            asyncio.open_connection(host, port, family=family),
            timeout=self.timeout,
        )

    async def resolve(self, host: str) -> list[IPAddress]:
        loop = asyncio.get_running_loop()
        infos = await loop.getaddrinfo(host, None, type=socket.SOCK_STREAM)
        addrs: dict[IPAddress, None] = {}
        for info in infos:
            # Drop any IPv6 zone suffix.
            addr = str(info[4][0]).split("%", 1)[0]
            addrs[ipaddress.ip_address(addr)] = None
        return list(addrs)

    def __repr__(self) -> str:
        return "DirectStrategy()"


class ProxiedStrategy(Strategy):
    """Dial through a SOCKS5 proxy.

    Lookups go through the proxy's tor RESOLVE extension when ``tor_lookup`` is
    set and through the system resolver otherwise.
    """

    kind = StrategyKind.PROXIED

    def __init__(self, proxy: ProxyEndpoint, tor_lookup: bool = True, timeout: float = DEFAULT_TIMEOUT):
        self.proxy = proxy
        self.tor_lookup = tor_lookup
        self.timeout = timeout
        self._system = DirectStrategy(timeout=timeout)

    async def connect(self, network: str, address: str) -> Streams:
        _family(network)
        host, port = _split_destination(address)
        return await socks_connect(
            self.proxy.host,
            self.proxy.port,
            host,
            port,
            username=self.proxy.username,
            password=self.proxy.password,
            timeout=self.timeout,
        )

    async def resolve(self, host: str) -> list[IPAddress]:
        if not self.tor_lookup:
            return await self._system.resolve(host)
        return await tor_lookup(host, self.proxy.host, self.proxy.port, timeout=self.timeout)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.proxy!r}, tor_lookup={self.tor_lookup})"


class OnionProxiedStrategy(ProxiedStrategy):
    """Dedicated proxy for hidden services; lookups always go through tor."""

    kind = StrategyKind.ONION_PROXIED

    def __init__(self, proxy: ProxyEndpoint, timeout: float = DEFAULT_TIMEOUT):
        super().__init__(proxy, tor_lookup=True, timeout=timeout)


class OnionDisabledStrategy(Strategy):
    """Every call fails; used when hidden services are turned off."""

    kind = StrategyKind.ONION_DISABLED

    async def connect(self, network: str, address: str) -> Streams:
        msg = "tor has been disabled"
        raise TorDisabledError(msg)

    async def resolve(self, host: str) -> list[IPAddress]:
        msg = "tor has been disabled"
        raise TorDisabledError(msg)

    def __repr__(self) -> str:
        return "OnionDisabledStrategy()"


@dataclass(frozen=True)
class NetworkRouter:
    """Route dials and lookups to the normal or the onion strategy."""

    normal: Strategy
    onion: Strategy

    def strategy_for(self, address: str) -> Strategy:
        """Return the strategy handling ``address``."""
        return self.onion if is_onion(address) else self.normal

    async def dial(self, network: str, address: str) -> Streams:
        """Open a stream to ``address`` (``host:port``)."""
        return await self.strategy_for(address).connect(network, address)

    async def lookup(self, host: str) -> list[IPAddress]:
        """Resolve ``host`` to its IP addresses."""
        return await self.strategy_for(host).resolve(host)


def build_strategies(
    proxy: str = "",
    proxy_user: str = "",
    proxy_pass: str = "",
    onion_proxy: str = "",
    onion_user: str = "",
    onion_pass: str = "",
    no_onion: bool = False,
) -> NetworkRouter:
    """Choose the normal and onion strategies for a proxy setup.

    Without a proxy ordinary traffic goes direct. With one, it is dialed
    through the proxy and names are resolved through tor unless hidden
    services are disabled. Onion traffic uses the dedicated onion proxy when
    one is set and otherwise follows ordinary traffic. ``no_onion`` makes
    every onion dial and lookup fail.
    """
    normal: Strategy
    if proxy:
        normal = ProxiedStrategy(
            ProxyEndpoint(proxy, proxy_user, proxy_pass), tor_lookup=not no_onion
        )
    else:
        normal = DirectStrategy()

    onion: Strategy
    if no_onion:
        onion = OnionDisabledStrategy()
    elif onion_proxy:
        onion = OnionProxiedStrategy(ProxyEndpoint(onion_proxy, onion_user, onion_pass))
    else:
        onion = normal

    logger.debug("Using %r for normal and %r for onion destinations", normal, onion)
    return NetworkRouter(normal=normal, onion=onion)
