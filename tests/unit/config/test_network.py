"""Tests for network selection and directory namespacing."""

from __future__ import annotations

import itertools
import os

import pytest

pytestmark = [pytest.mark.unit, pytest.mark.config]

from ccnode.config.network import NETWORK_FLAGS, namespace_dirs, select_network
from ccnode.netparams import MAIN_NET, REGRESSION_NET, SIM_NET, TEST_NET3
from ccnode.utils.exceptions import ConfigValidationError


def _flags(testnet=False, regtest=False, simnet=False):
    return {"testnet": testnet, "regtest": regtest, "simnet": simnet, "disable_dns_seed": False}


class TestSelectNetwork:
    """Tests for select_network()."""

    @pytest.mark.parametrize(
        ("flags", "expected"),
        [
            ({}, MAIN_NET),
            ({"testnet": True}, TEST_NET3),
            ({"regtest": True}, REGRESSION_NET),
            ({"simnet": True}, SIM_NET),
        ],
    )
    def test_single_selection(self, flags, expected):
        """Test zero or one flag picks the matching profile."""
        assert select_network(_flags(**flags)) is expected

    @pytest.mark.parametrize(
        "combo",
        [c for c in itertools.product([False, True], repeat=3) if sum(c) > 1],
    )
    def test_multiple_rejected(self, combo):
        """Test every combination of two or three flags is rejected."""
        values = _flags(**dict(zip(NETWORK_FLAGS, combo)))
        with pytest.raises(ConfigValidationError, match="can't be used together"):
            select_network(values)

    def test_simnet_disables_dns_seed(self):
        """Test the simulation network turns DNS seeding off."""
        values = _flags(simnet=True)
        select_network(values)
        assert values["disable_dns_seed"] is True

    def test_testnet_keeps_dns_seed(self):
        """Test other networks leave DNS seeding alone."""
        values = _flags(testnet=True)
        select_network(values)
        assert values["disable_dns_seed"] is False


class TestNamespaceDirs:
    """Tests for namespace_dirs()."""

    def test_appends_network_name(self, tmp_path):
        """Test both directories gain the network segment."""
        values = {"data_dir": str(tmp_path / "data"), "log_dir": str(tmp_path / "logs")}
        namespace_dirs(values, TEST_NET3)
        assert values["data_dir"] == os.path.join(str(tmp_path / "data"), "testnet")
        assert values["log_dir"] == os.path.join(str(tmp_path / "logs"), "testnet")

    def test_expands_home(self, tmp_path, monkeypatch):
        """Test ~ is expanded before namespacing."""
        monkeypatch.setenv("HOME", str(tmp_path))
        values = {"data_dir": "~/chain", "log_dir": "~/logs/"}
        namespace_dirs(values, MAIN_NET)
        assert values["data_dir"] == os.path.join(str(tmp_path), "chain", "mainnet")
        assert values["log_dir"] == os.path.join(str(tmp_path), "logs", "mainnet")
