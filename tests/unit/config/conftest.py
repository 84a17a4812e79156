"""Shared fixtures for configuration tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from ccnode.config.loader import ConfigLoader

LOCALHOST_ADDRS = ["127.0.0.1", "::1"]


def fake_lookup(host: str) -> list[str]:
    """Resolve ``localhost`` without touching the system resolver."""
    assert host == "localhost"
    return list(LOCALHOST_ADDRS)


@pytest.fixture
def loader() -> ConfigLoader:
    """Loader with a fixed program name and a fake localhost lookup."""
    return ConfigLoader(prog_name="ccnoded", lookup_host=fake_lookup)


@pytest.fixture
def write_config(tmp_path):
    """Write a configuration file and return its path."""

    def _write(text: str, name: str = "ccnode.toml") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
