"""Active network selection and per-network directory namespacing."""

from __future__ import annotations

import logging
import os
from typing import Any, MutableMapping

from ccnode.config.paths import clean_and_expand_path
from ccnode.netparams import MAIN_NET, REGRESSION_NET, SIM_NET, TEST_NET3, NetworkProfile
from ccnode.utils.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)

NETWORK_FLAGS = ("testnet", "regtest", "simnet")


def select_network(values: MutableMapping[str, Any]) -> NetworkProfile:
    """Pick the network profile selected by the network flags.

    No flag selects the main network. Selecting the simulation network also
    turns DNS seeding off.

    Raises:
        ConfigValidationError: If more than one network flag is set

    """
    selected = [flag for flag in NETWORK_FLAGS if values.get(flag)]
    if len(selected) > 1:
        msg = (
            "The testnet, regtest, and simnet params can't be used together "
            "-- choose one of the three"
        )
        raise ConfigValidationError(msg)

    if values.get("testnet"):
        return TEST_NET3
    if values.get("regtest"):
        return REGRESSION_NET
    if values.get("simnet"):
        values["disable_dns_seed"] = True
        return SIM_NET
    return MAIN_NET


def namespace_dirs(values: MutableMapping[str, Any], profile: NetworkProfile) -> None:
    """Expand the data and log directories and append the network name."""
    for key in ("data_dir", "log_dir"):
        values[key] = os.path.join(clean_and_expand_path(values[key]), profile.name)
    logger.debug("Using data directory %s", values["data_dir"])
