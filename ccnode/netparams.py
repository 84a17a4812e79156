"""Network profiles.

Each profile is a small static record of the ports and protocol constants of
one network the node can join. Exactly one is selected at startup and carried
in the node context next to the resolved configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

# Maximum bytes a block message payload may carry.
MAX_BLOCK_PAYLOAD: Final[int] = 1_000_000


@dataclass(frozen=True)
class NetworkProfile:
    """Static parameters of one network."""

    name: str
    default_port: str
    rpc_port: str
    net_magic: int
    pubkey_hash_addr_id: int
    script_hash_addr_id: int
    pow_limit_bits: int
    dns_seeds: tuple[str, ...] = ()

    def address_ids(self) -> tuple[int, int]:
        """Return the (pay-to-pubkey-hash, pay-to-script-hash) version bytes."""
        return (self.pubkey_hash_addr_id, self.script_hash_addr_id)


MAIN_NET: Final[NetworkProfile] = NetworkProfile(
    name="mainnet",
    default_port="8333",
    rpc_port="8334",
    net_magic=0xD9B4BEF9,
    pubkey_hash_addr_id=0x00,
    script_hash_addr_id=0x05,
    pow_limit_bits=0x1D00FFFF,
    dns_seeds=(
        "seed.bitcoin.sipa.be",
        "dnsseed.bluematt.me",
        "dnsseed.bitcoin.dashjr.org",
        "seed.bitcoinstats.com",
        "seed.bitnodes.io",
        "bitseed.xf2.org",
    ),
)

TEST_NET3: Final[NetworkProfile] = NetworkProfile(
    name="testnet",
    default_port="18333",
    rpc_port="18334",
    net_magic=0x0709110B,
    pubkey_hash_addr_id=0x6F,
    script_hash_addr_id=0xC4,
    pow_limit_bits=0x1D00FFFF,
    dns_seeds=(
        "testnet-seed.alexykot.me",
        "testnet-seed.bitcoin.petertodd.org",
        "testnet-seed.bluematt.me",
        "testnet-seed.bitcoin.schildbach.de",
    ),
)

# Regression test and test network share address prefixes.
REGRESSION_NET: Final[NetworkProfile] = NetworkProfile(
    name="regtest",
    default_port="18444",
    rpc_port="18334",
    net_magic=0xDAB5BFFA,
    pubkey_hash_addr_id=0x6F,
    script_hash_addr_id=0xC4,
    pow_limit_bits=0x207FFFFF,
)

SIM_NET: Final[NetworkProfile] = NetworkProfile(
    name="simnet",
    default_port="18555",
    rpc_port="18556",
    net_magic=0x12141C16,
    pubkey_hash_addr_id=0x3F,
    script_hash_addr_id=0x7B,
    pow_limit_bits=0x207FFFFF,
)

ALL_NETWORKS: Final[tuple[NetworkProfile, ...]] = (
    MAIN_NET,
    TEST_NET3,
    REGRESSION_NET,
    SIM_NET,
)
