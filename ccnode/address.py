"""Payout address decoding.

Only what configuration validation needs: decode a base58check address string
and tell whether it belongs to a given network.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import base58

from ccnode.netparams import ALL_NETWORKS, NetworkProfile
from ccnode.utils.exceptions import AddressError

# version byte + RIPEMD160 hash
_DECODED_LENGTH = 21


class AddressType(str, Enum):
    """Supported address kinds."""

    PUBKEY_HASH = "p2pkh"
    SCRIPT_HASH = "p2sh"


@dataclass(frozen=True)
class Address:
    """A decoded pay-to-pubkey-hash or pay-to-script-hash address."""

    encoded: str
    kind: AddressType
    net_id: int
    hash160: bytes

    def is_for_net(self, params: NetworkProfile) -> bool:
        """Return whether the address was encoded for ``params``."""
        pubkey_hash_id, script_hash_id = params.address_ids()
        if self.kind is AddressType.PUBKEY_HASH:
            return self.net_id == pubkey_hash_id
        return self.net_id == script_hash_id

    def __str__(self) -> str:
        """Return the base58check string."""
        return self.encoded


def decode_address(encoded: str) -> Address:
    """Decode a base58check address string.

    The version byte must belong to one of the known networks; the caller
    checks which one with ``Address.is_for_net``.

    Raises:
        AddressError: If the string is not a well-formed address

    """
    try:
        decoded = base58.b58decode_check(encoded)
    except ValueError as e:
        msg = f"decoded address is of unknown format: {e}"
        raise AddressError(msg) from e

    if len(decoded) != _DECODED_LENGTH:
        msg = f"decoded address is of unknown size ({len(decoded)} bytes)"
        raise AddressError(msg)

    net_id, payload = decoded[0], bytes(decoded[1:])
    if any(net_id == p.pubkey_hash_addr_id for p in ALL_NETWORKS):
        kind = AddressType.PUBKEY_HASH
    elif any(net_id == p.script_hash_addr_id for p in ALL_NETWORKS):
        kind = AddressType.SCRIPT_HASH
    else:
        msg = f"unknown address type (version byte {net_id:#04x})"
        raise AddressError(msg)

    return Address(encoded=encoded, kind=kind, net_id=net_id, hash160=payload)
