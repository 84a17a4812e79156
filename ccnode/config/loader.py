"""Configuration loading pipeline.

Loading runs once at startup:

1. built-in defaults
2. a tolerant pre-pass over the command line (config file path, version and
   service requests, network flags that affect the file pass)
3. the TOML configuration file
4. a strict pass over the environment and command line
5. network selection and directory namespacing
6. validation, address normalization and strategy selection

The result is either a ``NodeContext`` holding the frozen configuration, or
an ``EarlyExit`` when the request is answered without starting the node
(version, service command, subsystem listing, help).
"""

from __future__ import annotations

import contextlib
import logging
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Sequence

import click
import toml
from click.core import ParameterSource
from pydantic import ValidationError

from ccnode.address import Address
from ccnode.config.addresses import normalize_addresses
from ccnode.config.defaults import APP_HOME_DIR, DEFAULT_CONFIG_FILE, default_values
from ccnode.config.merge import merge_sources
from ccnode.config.network import namespace_dirs, select_network
from ccnode.config.options import OPTION_SPECS, OPTIONS_BY_LONG, build_command
from ccnode.config.paths import PATH_FIELDS, clean_and_expand_path
from ccnode.config.validation import HostLookup, lookup_host, validate
from ccnode.models import Config
from ccnode.netparams import NetworkProfile
from ccnode.proxy.strategy import NetworkRouter, build_strategies
from ccnode.service import ServiceHook, run_service_hook
from ccnode.utils.exceptions import (
    CommandLineError,
    ConfigFileError,
    ConfigurationError,
    HomeDirectoryError,
)
from ccnode.utils.logging_config import DebugLevels, format_subsystems
from ccnode.utils.version import app_name_from_argv0, format_version_banner

logger = logging.getLogger(__name__)

# Sources whose values count as explicitly set on the command line pass.
_EXPLICIT_SOURCES = (ParameterSource.COMMANDLINE, ParameterSource.ENVIRONMENT)

_OPTION_FIELDS = frozenset(spec.field for spec in OPTION_SPECS)
_REPEATABLE_FIELDS = tuple(spec.field for spec in OPTION_SPECS if spec.multiple)


class ExitKind(str, Enum):
    """Requests answered without starting the node."""

    VERSION = "version"
    SERVICE = "service"
    SHOW_SUBSYSTEMS = "show_subsystems"
    HELP = "help"


@dataclass(frozen=True)
class EarlyExit:
    """Terminal outcome of loading that is not an error.

    The caller prints ``message`` and exits with ``exit_code``.
    """

    kind: ExitKind
    message: str
    exit_code: int = 0


@dataclass(frozen=True)
class NodeContext:
    """Everything the node needs from startup configuration."""

    config: Config
    params: NetworkProfile
    router: NetworkRouter
    mining_addresses: tuple[Address, ...] = ()
    log_levels: DebugLevels = DebugLevels()
    warnings: tuple[str, ...] = ()
    remaining_args: tuple[str, ...] = ()


def _explicit_values(ctx: click.Context) -> dict[str, Any]:
    """Return the option values given on the command line or environment."""
    values: dict[str, Any] = {}
    for name, value in ctx.params.items():
        if name not in _OPTION_FIELDS:
            continue
        if ctx.get_parameter_source(name) not in _EXPLICIT_SOURCES:
            continue
        values[name] = value
    return values


def _flatten_file_values(data: Mapping[str, Any], path: str) -> dict[str, Any]:
    """Flatten one level of tables into a single ``key -> value`` mapping."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                if isinstance(sub_value, dict):
                    msg = f"Error parsing config file {path}: nested table [{key}.{sub_key}] is not supported"
                    raise ConfigFileError(msg)
                flat[sub_key] = sub_value
        else:
            flat[key] = value
    return flat


def load_config_file(path: str) -> dict[str, Any]:
    """Read a configuration file into ``field -> value``.

    Only keys present in the file are returned.

    Raises:
        OSError: If the file cannot be read
        ConfigFileError: If the file is malformed, names an unknown option or
            holds a value of the wrong type

    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = toml.loads(text)
    except toml.TomlDecodeError as e:
        msg = f"Error parsing config file {path}: {e}"
        raise ConfigFileError(msg) from e

    values: dict[str, Any] = {}
    for key, raw in _flatten_file_values(data, path).items():
        spec = OPTIONS_BY_LONG.get(key)
        if spec is None:
            msg = f"Error parsing config file {path}: unknown option '{key}'"
            raise ConfigFileError(msg)
        try:
            values[spec.field] = spec.convert(raw)
        except click.BadParameter as e:
            msg = f"Error parsing config file {path}: invalid value for '{key}': {e.format_message()}"
            raise ConfigFileError(msg) from e

    logger.debug("Loaded %d option(s) from %s", len(values), path)
    return values


class ConfigLoader:
    """Run the configuration pipeline for one process."""

    def __init__(
        self,
        prog_name: str | None = None,
        service_hook: ServiceHook | None = None,
        lookup_host: HostLookup = lookup_host,
        home_dir: str | Path | None = None,
    ):
        """Initialize the loader.

        Args:
            prog_name: Executable name used in messages; defaults to argv[0]
            service_hook: Runs ``--service`` commands; the option is only
                offered when a hook is given
            lookup_host: Resolver used for the default RPC listeners
            home_dir: Application home directory created before loading;
                defaults to the platform data directory

        """
        self.prog_name = prog_name or app_name_from_argv0(sys.argv[0])
        self.service_hook = service_hook
        self.lookup_host = lookup_host
        self.home_dir = Path(home_dir) if home_dir is not None else None
        self.command = build_command(self.prog_name, with_service=service_hook is not None)

    def ensure_home_dir(self) -> Path:
        """Create the application home directory if it does not exist.

        Raises:
            HomeDirectoryError: If the directory cannot be created

        """
        home = self.home_dir if self.home_dir is not None else APP_HOME_DIR
        try:
            home.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Failed to create home directory {home}: {e}"
            raise HomeDirectoryError(msg) from e
        return home

    def _context(self) -> click.Context:
        return click.Context(self.command, info_name=self.prog_name)

    def usage(self) -> str:
        """Return the short usage text printed after fatal errors."""
        return f"{self.command.get_usage(self._context())}\nTry '{self.prog_name} -h' for help."

    def help_text(self) -> str:
        """Return the full option help."""
        return self.command.get_help(self._context())

    def parse_preliminary(self, args: Sequence[str]) -> dict[str, Any]:
        """Parse the command line ignoring unknown options and bad values.

        Returns every option value (defaults included). If the command line
        cannot be parsed at all the defaults are returned; the strict pass
        reports the problem later.
        """
        values: dict[str, Any] = {"show_help": False, "service": None}
        values.update(default_values())
        with contextlib.suppress(click.ClickException):
            ctx = self.command.make_context(
                self.prog_name,
                list(args),
                resilient_parsing=True,
                ignore_unknown_options=True,
            )
            for name, value in ctx.params.items():
                if value is not None:
                    values[name] = value
        return values

    def parse_command_line(self, args: Sequence[str]) -> tuple[dict[str, Any], tuple[str, ...]]:
        """Parse the environment and command line strictly.

        Returns:
            Tuple of (explicitly set ``field -> value``, positional leftovers)

        Raises:
            CommandLineError: On unknown options or invalid values

        """
        try:
            ctx = self.command.make_context(self.prog_name, list(args))
        except click.UsageError as e:
            raise CommandLineError(e.format_message()) from e
        return _explicit_values(ctx), tuple(ctx.args)

    def load(self, args: Sequence[str] | None = None) -> NodeContext | EarlyExit:
        """Resolve the configuration from ``args`` (default ``sys.argv[1:]``).

        Raises:
            ConfigurationError: On any fatal configuration problem

        """
        if args is None:
            args = sys.argv[1:]

        self.ensure_home_dir()
        pre = self.parse_preliminary(args)
        if pre["show_help"]:
            # Help aborts startup like a parse failure, without the usage.
            return EarlyExit(ExitKind.HELP, self.help_text(), exit_code=1)
        if pre["show_version"]:
            return EarlyExit(ExitKind.VERSION, format_version_banner(self.prog_name))
        if self.service_hook is not None and pre["service"]:
            message = run_service_hook(self.service_hook, pre["service"])
            return EarlyExit(ExitKind.SERVICE, message)

        warnings: list[str] = []
        file_values: dict[str, Any] = {}
        config_file = pre["config_file"]
        if not ((pre["regtest"] or pre["simnet"]) and config_file == DEFAULT_CONFIG_FILE):
            path = clean_and_expand_path(config_file)
            try:
                file_values = load_config_file(path)
            except OSError as e:
                warnings.append(f"Unable to read config file {path}: {e}")
        if pre["regtest"]:
            file_values.pop("add_peers", None)

        cli_values, remaining_args = self.parse_command_line(args)
        values = merge_sources(default_values(), file_values, cli_values)

        profile = select_network(values)
        namespace_dirs(values, profile)

        if values["debug_level"] == "show":
            return EarlyExit(ExitKind.SHOW_SUBSYSTEMS, f"Supported subsystems {format_subsystems()}")

        result = validate(values, profile, self.lookup_host)

        for key in ("listeners", "add_peers", "connect_peers"):
            values[key] = normalize_addresses(values[key], profile.default_port)
        values["rpc_listeners"] = normalize_addresses(values["rpc_listeners"], profile.rpc_port)

        router = build_strategies(
            proxy=values["proxy"],
            proxy_user=values["proxy_user"],
            proxy_pass=values["proxy_pass"],
            onion_proxy=values["onion_proxy"],
            onion_user=values["onion_proxy_user"],
            onion_pass=values["onion_proxy_pass"],
            no_onion=values["no_onion"],
        )

        for key in PATH_FIELDS:
            if key not in ("data_dir", "log_dir"):
                values[key] = clean_and_expand_path(values[key])
        for key in _REPEATABLE_FIELDS:
            values[key] = tuple(values[key])

        try:
            config = Config(**values)
        except ValidationError as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigurationError(msg) from e

        logger.debug("Configuration loaded for %s", profile.name)
        return NodeContext(
            config=config,
            params=profile,
            router=router,
            mining_addresses=result.mining_addresses,
            log_levels=result.log_levels,
            warnings=tuple(warnings),
            remaining_args=remaining_args,
        )


def load_config(
    args: Sequence[str] | None = None,
    prog_name: str | None = None,
    service_hook: ServiceHook | None = None,
    lookup_host: HostLookup = lookup_host,
    home_dir: str | Path | None = None,
) -> NodeContext | EarlyExit:
    """Load the node configuration with a fresh ``ConfigLoader``."""
    loader = ConfigLoader(
        prog_name=prog_name,
        service_hook=service_hook,
        lookup_host=lookup_host,
        home_dir=home_dir,
    )
    return loader.load(args)
