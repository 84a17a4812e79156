"""Pydantic models for ccNode.

Provides the validated, immutable configuration record handed to the rest of
the node once loading has finished.
"""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, Field, field_validator, model_validator

from ccnode.netparams import MAX_BLOCK_PAYLOAD

UINT32_MAX = 2**32 - 1
BLOCK_MAX_SIZE_MIN = 1000
BLOCK_MAX_SIZE_MAX = MAX_BLOCK_PAYLOAD - 1000
SUPPORTED_DB_TYPES = ("leveldb", "memdb")


class Config(BaseModel):
    """Resolved node configuration.

    Built only after every source has been merged and validated. Repeatable
    options are held as tuples so the record can not change in place. Address
    lists are normalized to ``host:port`` form and path fields are expanded.
    Every field is required; defaults are applied before this record is built.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    # General
    show_version: bool = Field(..., description="Display version information and exit")
    config_file: str = Field(..., description="Path to configuration file")
    data_dir: str = Field(
        ...,
        description="Directory to store data (network name appended)",
    )
    log_dir: str = Field(
        ...,
        description="Directory to log output (network name appended)",
    )

    # Peers
    add_peers: tuple[str, ...] = Field(..., description="Peers to connect with at startup")
    connect_peers: tuple[str, ...] = Field(
        ...,
        description="Only connect to these peers at startup",
    )
    disable_listen: bool = Field(..., description="Disable listening for incoming connections")
    listeners: tuple[str, ...] = Field(..., description="Interfaces/ports to listen on")
    max_peers: int = Field(..., description="Max number of inbound and outbound peers")
    ban_duration: timedelta = Field(
        ...,
        description="How long to ban misbehaving peers",
    )
    disable_dns_seed: bool = Field(..., description="Disable DNS seeding for peers")
    external_ips: tuple[str, ...] = Field(..., description="Local addresses announced to peers")
    upnp: bool = Field(..., description="Map the listening port with UPnP")

    # RPC
    rpc_user: str = Field(..., description="Username for RPC connections")
    rpc_pass: str = Field(..., description="Password for RPC connections")
    rpc_listeners: tuple[str, ...] = Field(..., description="Interfaces/ports to listen on for RPC")
    rpc_cert: str = Field(..., description="RPC certificate file")
    rpc_key: str = Field(..., description="RPC certificate key file")
    rpc_max_clients: int = Field(
        ...,
        description="Max number of RPC clients for standard connections",
    )
    rpc_max_websockets: int = Field(
        ...,
        description="Max number of RPC websocket connections",
    )
    disable_rpc: bool = Field(..., description="Disable the built-in RPC server")

    # Proxies
    proxy: str = Field(..., description="SOCKS5 proxy for all outbound connections (host:port)")
    proxy_user: str = Field(..., description="Username for proxy server")
    proxy_pass: str = Field(..., description="Password for proxy server")
    onion_proxy: str = Field(..., description="SOCKS5 proxy for tor hidden services (host:port)")
    onion_proxy_user: str = Field(..., description="Username for onion proxy server")
    onion_proxy_pass: str = Field(..., description="Password for onion proxy server")
    no_onion: bool = Field(..., description="Disable connecting to tor hidden services")

    # Network selection
    testnet: bool = Field(..., description="Use the test network")
    regtest: bool = Field(..., description="Use the regression test network")
    simnet: bool = Field(..., description="Use the simulation test network")

    # Chain and mining
    disable_checkpoints: bool = Field(..., description="Disable built-in checkpoints")
    db_type: str = Field(..., description="Database backend for the block chain")
    free_tx_relay_limit: float = Field(
        ...,
        description="Free transaction relay limit in thousands of bytes per minute",
    )
    block_min_size: int = Field(
        ...,
        ge=0,
        le=UINT32_MAX,
        description="Minimum block size in bytes when creating a block",
    )
    block_max_size: int = Field(
        ...,
        ge=BLOCK_MAX_SIZE_MIN,
        le=BLOCK_MAX_SIZE_MAX,
        description="Maximum block size in bytes when creating a block",
    )
    block_priority_size: int = Field(
        ...,
        ge=0,
        le=UINT32_MAX,
        description="Bytes reserved for high-priority/low-fee transactions",
    )
    getwork_keys: tuple[str, ...] = Field(..., description="Payout addresses for getwork blocks")

    # Debugging
    profile: str = Field(..., description="HTTP profiling port")
    cpu_profile: str = Field(..., description="CPU profile output file")
    debug_level: str = Field(..., description="Logging level specification")

    @field_validator("db_type")
    @classmethod
    def validate_db_type(cls, v: str) -> str:
        """Validate database backend."""
        if v not in SUPPORTED_DB_TYPES:
            msg = f"db_type must be one of {SUPPORTED_DB_TYPES}, got {v}"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_block_sizes(self) -> Config:
        """Block sizes keep min <= priority <= max."""
        if self.block_min_size > self.block_max_size:
            msg = "block_min_size must not exceed block_max_size"
            raise ValueError(msg)
        if self.block_priority_size > self.block_max_size:
            msg = "block_priority_size must not exceed block_max_size"
            raise ValueError(msg)
        if self.block_min_size > self.block_priority_size:
            msg = "block_min_size must not exceed block_priority_size"
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def validate_peer_lists(self) -> Config:
        """Additional peers and exclusive peers are mutually exclusive."""
        if self.add_peers and self.connect_peers:
            msg = "add_peers and connect_peers can not both be set"
            raise ValueError(msg)
        return self
