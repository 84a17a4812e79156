"""SOCKS5 and tor support for ccNode.

This module provides the dial and lookup strategies used for outbound peer
connections, directly or through SOCKS5 proxies and tor.
"""

from __future__ import annotations

from ccnode.proxy.exceptions import (
    ProxyAuthError,
    ProxyConfigurationError,
    ProxyConnectionError,
    ProxyError,
    ProxyTimeoutError,
    TorDisabledError,
    TorLookupError,
)
from ccnode.proxy.strategy import (
    DirectStrategy,
    NetworkRouter,
    OnionDisabledStrategy,
    OnionProxiedStrategy,
    ProxiedStrategy,
    ProxyEndpoint,
    Strategy,
    StrategyKind,
    build_strategies,
)

__all__ = [
    "DirectStrategy",
    "NetworkRouter",
    "OnionDisabledStrategy",
    "OnionProxiedStrategy",
    "ProxiedStrategy",
    "ProxyAuthError",
    "ProxyConfigurationError",
    "ProxyConnectionError",
    "ProxyEndpoint",
    "ProxyError",
    "ProxyTimeoutError",
    "Strategy",
    "StrategyKind",
    "TorDisabledError",
    "TorLookupError",
    "build_strategies",
]
