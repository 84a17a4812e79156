"""Option schema shared by the command line and the configuration file.

Every configurable field is described once by an ``OptionSpec``. The click
command used for both command-line passes and the value conversion of the
file pass are built from the same records, so a key means the same thing in
every source.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Final

import click

from ccnode.models import UINT32_MAX

ENVVAR_PREFIX: Final[str] = "CCNODE"

_DURATION_UNITS: Final[dict[str, float]] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``24h``, ``1h30m`` or ``90s``.

    A bare ``0`` is accepted; every other value needs a unit.

    Raises:
        ValueError: If the text is not a valid duration

    """
    value = text.strip()
    sign = 1.0
    if value[:1] in ("+", "-"):
        sign = -1.0 if value[0] == "-" else 1.0
        value = value[1:]
    if value == "0":
        return timedelta(0)
    if not value:
        msg = f"invalid duration {text!r}"
        raise ValueError(msg)

    seconds = 0.0
    pos = 0
    while pos < len(value):
        match = _DURATION_PART.match(value, pos)
        if match is None:
            msg = f"invalid duration {text!r}"
            raise ValueError(msg)
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    return timedelta(seconds=sign * seconds)


def format_duration(value: timedelta) -> str:
    """Format a duration the way ``parse_duration`` reads it (``24h0m0s``)."""
    total = value.total_seconds()
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{sign}{int(hours)}h{int(minutes)}m{seconds:g}s"
    if minutes:
        return f"{sign}{int(minutes)}m{seconds:g}s"
    return f"{sign}{seconds:g}s"


class DurationParamType(click.ParamType):
    """Click type for durations; bare numbers are seconds."""

    name = "duration"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> timedelta:
        if isinstance(value, timedelta):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return timedelta(seconds=value)
        try:
            return parse_duration(str(value))
        except ValueError as e:
            self.fail(str(e), param, ctx)


DURATION = DurationParamType()
UINT32 = click.IntRange(0, UINT32_MAX)

_TYPES: Final[dict[str, click.ParamType]] = {
    "string": click.STRING,
    "path": click.STRING,
    "int": click.INT,
    "uint32": UINT32,
    "float": click.FLOAT,
    "duration": DURATION,
    "flag": click.BOOL,
}


@dataclass(frozen=True)
class OptionSpec:
    """One configurable option.

    ``field`` is the configuration attribute, ``long`` is both the flag name
    (``--long``) and the configuration file key.
    """

    field: str
    long: str
    kind: str
    help: str
    short: str | None = None
    multiple: bool = False

    @property
    def click_type(self) -> click.ParamType:
        return _TYPES[self.kind]

    @property
    def envvar(self) -> str:
        return f"{ENVVAR_PREFIX}_{self.long.upper()}"

    def to_click_option(self) -> click.Option:
        """Build the click option for this record."""
        decls = [f"--{self.long}", self.field]
        if self.short:
            decls.insert(0, f"-{self.short}")
        if self.kind == "flag":
            return click.Option(
                decls, is_flag=True, default=False, envvar=self.envvar, help=self.help
            )
        return click.Option(
            decls,
            type=self.click_type,
            multiple=self.multiple,
            envvar=self.envvar,
            help=self.help,
        )

    def convert(self, value: Any) -> Any:
        """Convert a configuration file value to this option's type.

        Raises:
            click.BadParameter: If the value cannot be converted

        """
        if self.multiple:
            items = value if isinstance(value, list) else [value]
            return [self.click_type.convert(item, None, None) for item in items]
        if isinstance(value, (list, dict)):
            msg = f"expected a single value, got {type(value).__name__}"
            raise click.BadParameter(msg)
        return self.click_type.convert(value, None, None)


OPTION_SPECS: Final[tuple[OptionSpec, ...]] = (
    OptionSpec("show_version", "version", "flag", "Display version information and exit", short="V"),
    OptionSpec("config_file", "configfile", "path", "Path to configuration file", short="C"),
    OptionSpec("data_dir", "datadir", "path", "Directory to store data", short="b"),
    OptionSpec("log_dir", "logdir", "path", "Directory to log output."),
    OptionSpec("add_peers", "addpeer", "string", "Add a peer to connect with at startup", short="a", multiple=True),
    OptionSpec("connect_peers", "connect", "string", "Connect only to the specified peers at startup", multiple=True),
    OptionSpec(
        "disable_listen",
        "nolisten",
        "flag",
        "Disable listening for incoming connections -- NOTE: Listening is "
        "automatically disabled if the --connect or --proxy options are used "
        "without also specifying listen interfaces via --listen",
    ),
    OptionSpec(
        "listeners",
        "listen",
        "string",
        "Add an interface/port to listen for connections "
        "(default all interfaces port: 8333, testnet: 18333)",
        multiple=True,
    ),
    OptionSpec("max_peers", "maxpeers", "int", "Max number of inbound and outbound peers"),
    OptionSpec(
        "ban_duration",
        "banduration",
        "duration",
        "How long to ban misbehaving peers.  Valid time units are {s, m, h}.  Minimum 1 second",
    ),
    OptionSpec("rpc_user", "rpcuser", "string", "Username for RPC connections", short="u"),
    OptionSpec("rpc_pass", "rpcpass", "string", "Password for RPC connections", short="P"),
    OptionSpec(
        "rpc_listeners",
        "rpclisten",
        "string",
        "Add an interface/port to listen for RPC connections (default port: 8334, testnet: 18334)",
        multiple=True,
    ),
    OptionSpec("rpc_cert", "rpccert", "path", "File containing the certificate file"),
    OptionSpec("rpc_key", "rpckey", "path", "File containing the certificate key"),
    OptionSpec("rpc_max_clients", "rpcmaxclients", "int", "Max number of RPC clients for standard connections"),
    OptionSpec("rpc_max_websockets", "rpcmaxwebsockets", "int", "Max number of RPC websocket connections"),
    OptionSpec(
        "disable_rpc",
        "norpc",
        "flag",
        "Disable built-in RPC server -- NOTE: The RPC server is disabled by "
        "default if no rpcuser/rpcpass is specified",
    ),
    OptionSpec("disable_dns_seed", "nodnsseed", "flag", "Disable DNS seeding for peers"),
    OptionSpec(
        "external_ips",
        "externalip",
        "string",
        "Add an ip to the list of local addresses we claim to listen on to peers",
        multiple=True,
    ),
    OptionSpec("proxy", "proxy", "string", "Connect via SOCKS5 proxy (eg. 127.0.0.1:9050)"),
    OptionSpec("proxy_user", "proxyuser", "string", "Username for proxy server"),
    OptionSpec("proxy_pass", "proxypass", "string", "Password for proxy server"),
    OptionSpec("onion_proxy", "onion", "string", "Connect to tor hidden services via SOCKS5 proxy (eg. 127.0.0.1:9050)"),
    OptionSpec("onion_proxy_user", "onionuser", "string", "Username for onion proxy server"),
    OptionSpec("onion_proxy_pass", "onionpass", "string", "Password for onion proxy server"),
    OptionSpec("no_onion", "noonion", "flag", "Disable connecting to tor hidden services"),
    OptionSpec("testnet", "testnet", "flag", "Use the test network"),
    OptionSpec("regtest", "regtest", "flag", "Use the regression test network"),
    OptionSpec("simnet", "simnet", "flag", "Use the simulation test network"),
    OptionSpec(
        "disable_checkpoints",
        "nocheckpoints",
        "flag",
        "Disable built-in checkpoints.  Don't do this unless you know what you're doing.",
    ),
    OptionSpec("db_type", "dbtype", "string", "Database backend to use for the Block Chain"),
    OptionSpec(
        "profile",
        "profile",
        "string",
        "Enable HTTP profiling on given port -- NOTE port must be between 1024 and 65535",
    ),
    OptionSpec("cpu_profile", "cpuprofile", "path", "Write CPU profile to the specified file"),
    OptionSpec(
        "debug_level",
        "debuglevel",
        "string",
        "Logging level for all subsystems {trace, debug, info, warn, error, "
        "critical} -- You may also specify <subsystem>=<level>,"
        "<subsystem2>=<level>,... to set the log level for individual "
        "subsystems -- Use show to list available subsystems",
        short="d",
    ),
    OptionSpec("upnp", "upnp", "flag", "Use UPnP to map our listening port outside of NAT"),
    OptionSpec(
        "free_tx_relay_limit",
        "limitfreerelay",
        "float",
        "Limit relay of transactions with no transaction fee to the given "
        "amount in thousands of bytes per minute",
    ),
    OptionSpec("block_min_size", "blockminsize", "uint32", "Mininum block size in bytes to be used when creating a block"),
    OptionSpec("block_max_size", "blockmaxsize", "uint32", "Maximum block size in bytes to be used when creating a block"),
    OptionSpec(
        "block_priority_size",
        "blockprioritysize",
        "uint32",
        "Size in bytes for high-priority/low-fee transactions when creating a block",
    ),
    OptionSpec(
        "getwork_keys",
        "getworkkey",
        "string",
        "Use the specified payment address for blocks generated by getwork.",
        multiple=True,
    ),
)

SERVICE_OPTION: Final[OptionSpec] = OptionSpec(
    "service", "service", "string", "Service command {install, remove, start, stop}", short="s"
)

OPTIONS_BY_LONG: Final[dict[str, OptionSpec]] = {spec.long: spec for spec in OPTION_SPECS}
OPTIONS_BY_FIELD: Final[dict[str, OptionSpec]] = {spec.field: spec for spec in OPTION_SPECS}


def build_command(prog_name: str, with_service: bool = False) -> click.Command:
    """Build the click command holding every option.

    The command has no callback; the loader only uses it to parse.
    """
    params: list[click.Parameter] = [spec.to_click_option() for spec in OPTION_SPECS]
    if with_service:
        params.append(SERVICE_OPTION.to_click_option())
    params.append(
        click.Option(["-h", "--help", "show_help"], is_flag=True, default=False, help="Show this message and exit.")
    )
    return click.Command(
        name=prog_name,
        params=params,
        add_help_option=False,
        context_settings={"allow_extra_args": True, "max_content_width": 100},
        help="ccNode peer-to-peer node daemon.",
    )
