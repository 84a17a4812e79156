"""Pytest configuration and shared fixtures for ccNode tests."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest


def pytest_configure(config):
    """Register all project markers to avoid warnings when ini isn't loaded."""
    markers = [
        ("asyncio", "marks tests as async (deselect with '-m \"not asyncio\"')"),
        ("unit", "marks tests as unit tests"),
        ("cli", "marks tests as CLI tests"),
        ("config", "marks tests as configuration tests"),
        ("proxy", "marks tests as proxy and tor routing tests"),
        ("models", "marks tests as model tests"),
        ("logging", "marks tests as logging tests"),
    ]
    for name, desc in markers:
        config.addinivalue_line("markers", f"{name}: {desc}")


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch) -> Path:
    """Point every default path at a temporary home and clear CCNODE_* variables.

    Keeps tests from reading a real ``~/.ccnode/ccnode.toml`` or writing logs
    into the user's home directory.
    """
    from ccnode.config import defaults, loader

    home = tmp_path / "ccnode-home"
    monkeypatch.setattr(loader, "APP_HOME_DIR", home)
    monkeypatch.setattr(defaults, "DEFAULT_CONFIG_FILE", str(home / "ccnode.toml"))
    monkeypatch.setattr(loader, "DEFAULT_CONFIG_FILE", str(home / "ccnode.toml"))
    monkeypatch.setattr(defaults, "DEFAULT_DATA_DIR", str(home / "data"))
    monkeypatch.setattr(defaults, "DEFAULT_LOG_DIR", str(home / "logs"))
    monkeypatch.setattr(defaults, "DEFAULT_RPC_CERT_FILE", str(home / "rpc.cert"))
    monkeypatch.setattr(defaults, "DEFAULT_RPC_KEY_FILE", str(home / "rpc.key"))

    for name in list(os.environ):
        if name.startswith("CCNODE_"):
            monkeypatch.delenv(name)
    return home


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Clean up logging handlers after each test to prevent closed file errors."""
    yield
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
