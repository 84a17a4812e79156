"""Built-in defaults.

Every configuration field starts from one of the named constants below; the
configuration file, environment and command line then overlay them.
"""

from __future__ import annotations

import os
import sys
from datetime import timedelta
from pathlib import Path
from typing import Any, Final

from ccnode.models import BLOCK_MAX_SIZE_MAX, BLOCK_MAX_SIZE_MIN, SUPPORTED_DB_TYPES  # noqa: F401
from ccnode.utils.logging_config import DEFAULT_LOG_LEVEL

# Platform detection
IS_WINDOWS = sys.platform == "win32"
IS_MACOS = sys.platform == "darwin"

APP_NAME: Final[str] = "ccnode"

DEFAULT_CONFIG_FILENAME: Final[str] = "ccnode.toml"
DEFAULT_DATA_DIRNAME: Final[str] = "data"
DEFAULT_LOG_DIRNAME: Final[str] = "logs"
DEFAULT_MAX_PEERS: Final[int] = 125
DEFAULT_BAN_DURATION: Final[timedelta] = timedelta(hours=24)
DEFAULT_MAX_RPC_CLIENTS: Final[int] = 10
DEFAULT_MAX_RPC_WEBSOCKETS: Final[int] = 25
DEFAULT_DB_TYPE: Final[str] = "leveldb"
DEFAULT_FREE_TX_RELAY_LIMIT: Final[float] = 15.0
DEFAULT_BLOCK_MIN_SIZE: Final[int] = 0
DEFAULT_BLOCK_MAX_SIZE: Final[int] = 750_000
DEFAULT_BLOCK_PRIORITY_SIZE: Final[int] = 50_000


def app_data_dir(app_name: str = APP_NAME) -> Path:
    """Return the per-application data directory for this platform.

    Windows: ``%LOCALAPPDATA%\\<App>``, macOS: ``~/Library/Application
    Support/<App>``, everything else: ``~/.<app>``.
    """
    app_name = app_name.lstrip(".")
    if not app_name:
        return Path(".")

    home = Path.home()
    if IS_WINDOWS:
        app_data = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if app_data:
            return Path(app_data) / app_name.capitalize()
        return home / app_name.capitalize()
    if IS_MACOS:
        return home / "Library" / "Application Support" / app_name.capitalize()
    return home / f".{app_name.lower()}"


APP_HOME_DIR: Final[Path] = app_data_dir()
DEFAULT_CONFIG_FILE: Final[str] = str(APP_HOME_DIR / DEFAULT_CONFIG_FILENAME)
DEFAULT_DATA_DIR: Final[str] = str(APP_HOME_DIR / DEFAULT_DATA_DIRNAME)
DEFAULT_LOG_DIR: Final[str] = str(APP_HOME_DIR / DEFAULT_LOG_DIRNAME)
DEFAULT_RPC_KEY_FILE: Final[str] = str(APP_HOME_DIR / "rpc.key")
DEFAULT_RPC_CERT_FILE: Final[str] = str(APP_HOME_DIR / "rpc.cert")


def default_values() -> dict[str, Any]:
    """Return a fresh mapping of every configuration field to its default."""
    return {
        "show_version": False,
        "config_file": DEFAULT_CONFIG_FILE,
        "data_dir": DEFAULT_DATA_DIR,
        "log_dir": DEFAULT_LOG_DIR,
        "add_peers": [],
        "connect_peers": [],
        "disable_listen": False,
        "listeners": [],
        "max_peers": DEFAULT_MAX_PEERS,
        "ban_duration": DEFAULT_BAN_DURATION,
        "rpc_user": "",
        "rpc_pass": "",
        "rpc_listeners": [],
        "rpc_cert": DEFAULT_RPC_CERT_FILE,
        "rpc_key": DEFAULT_RPC_KEY_FILE,
        "rpc_max_clients": DEFAULT_MAX_RPC_CLIENTS,
        "rpc_max_websockets": DEFAULT_MAX_RPC_WEBSOCKETS,
        "disable_rpc": False,
        "disable_dns_seed": False,
        "external_ips": [],
        "proxy": "",
        "proxy_user": "",
        "proxy_pass": "",
        "onion_proxy": "",
        "onion_proxy_user": "",
        "onion_proxy_pass": "",
        "no_onion": False,
        "testnet": False,
        "regtest": False,
        "simnet": False,
        "disable_checkpoints": False,
        "db_type": DEFAULT_DB_TYPE,
        "profile": "",
        "cpu_profile": "",
        "debug_level": DEFAULT_LOG_LEVEL,
        "upnp": False,
        "free_tx_relay_limit": DEFAULT_FREE_TX_RELAY_LIMIT,
        "block_min_size": DEFAULT_BLOCK_MIN_SIZE,
        "block_max_size": DEFAULT_BLOCK_MAX_SIZE,
        "block_priority_size": DEFAULT_BLOCK_PRIORITY_SIZE,
        "getwork_keys": [],
    }
