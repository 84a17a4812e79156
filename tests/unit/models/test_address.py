"""Tests for payout address decoding."""

from __future__ import annotations

import base58
import pytest

pytestmark = [pytest.mark.unit, pytest.mark.models]

from ccnode.address import AddressType, decode_address
from ccnode.netparams import ALL_NETWORKS, MAIN_NET, REGRESSION_NET, SIM_NET, TEST_NET3
from ccnode.utils.exceptions import AddressError


def _encode(version: int, payload: bytes = b"\x42" * 20) -> str:
    return base58.b58encode_check(bytes([version]) + payload).decode()


class TestDecodeAddress:
    """Tests for decode_address()."""

    @pytest.mark.parametrize("params", ALL_NETWORKS, ids=lambda p: p.name)
    def test_pubkey_hash(self, params):
        """Test pay-to-pubkey-hash addresses for every network."""
        encoded = _encode(params.pubkey_hash_addr_id)
        addr = decode_address(encoded)
        assert addr.kind is AddressType.PUBKEY_HASH
        assert addr.hash160 == b"\x42" * 20
        assert addr.is_for_net(params)
        assert str(addr) == encoded

    @pytest.mark.parametrize("params", ALL_NETWORKS, ids=lambda p: p.name)
    def test_script_hash(self, params):
        """Test pay-to-script-hash addresses for every network."""
        addr = decode_address(_encode(params.script_hash_addr_id))
        assert addr.kind is AddressType.SCRIPT_HASH
        assert addr.is_for_net(params)

    def test_network_mismatch(self):
        """Test is_for_net tells networks apart."""
        addr = decode_address(_encode(MAIN_NET.pubkey_hash_addr_id))
        assert not addr.is_for_net(TEST_NET3)
        assert not addr.is_for_net(SIM_NET)

    def test_testnet_and_regtest_share_prefixes(self):
        """Test a testnet address is also valid on the regression network."""
        addr = decode_address(_encode(TEST_NET3.pubkey_hash_addr_id))
        assert addr.is_for_net(REGRESSION_NET)

    def test_bad_checksum(self):
        """Test a corrupted checksum is rejected."""
        encoded = _encode(0x00)
        corrupted = encoded[:-1] + ("2" if encoded[-1] != "2" else "3")
        with pytest.raises(AddressError):
            decode_address(corrupted)

    def test_invalid_characters(self):
        """Test characters outside the base58 alphabet are rejected."""
        with pytest.raises(AddressError):
            decode_address("0OIl")

    def test_wrong_length(self):
        """Test payloads that are not a 20 byte hash are rejected."""
        with pytest.raises(AddressError, match="unknown size"):
            decode_address(_encode(0x00, b"\x01" * 32))

    def test_unknown_version(self):
        """Test version bytes of no known network are rejected."""
        with pytest.raises(AddressError, match="unknown address type"):
            decode_address(_encode(0x30))

    @pytest.mark.parametrize("params", ALL_NETWORKS, ids=lambda p: p.name)
    def test_network_address_ids(self, params):
        """Test the profile's version bytes decode to the matching address kinds."""
        pubkey_hash_id, script_hash_id = params.address_ids()
        assert decode_address(_encode(pubkey_hash_id)).kind is AddressType.PUBKEY_HASH
        assert decode_address(_encode(script_hash_id)).kind is AddressType.SCRIPT_HASH
