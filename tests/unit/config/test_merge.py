"""Tests for source precedence merging."""

from __future__ import annotations

import pytest

pytestmark = [pytest.mark.unit, pytest.mark.config]

from ccnode.config.defaults import default_values
from ccnode.config.merge import merge_sources, overlay


class TestOverlay:
    """Tests for overlay()."""

    def test_only_present_keys_replace(self):
        """Test keys missing from the update keep the base value."""
        assert overlay({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_inputs_not_aliased(self):
        """Test list values are copied."""
        base = {"peers": ["a"]}
        update = {"other": ["b"]}
        merged = overlay(base, update)
        merged["peers"].append("x")
        merged["other"].append("y")
        assert base == {"peers": ["a"]}
        assert update == {"other": ["b"]}

    def test_explicit_default_value_counts(self):
        """Test a value equal to the base still counts as present."""
        assert overlay({"max_peers": 10}, {"max_peers": 125}) == {"max_peers": 125}


class TestMergeSources:
    """Tests for the defaults < file < command line order."""

    @pytest.mark.parametrize(
        ("file_values", "cli_values", "expected"),
        [
            ({}, {}, 125),
            ({"max_peers": 10}, {}, 10),
            ({}, {"max_peers": 20}, 20),
            ({"max_peers": 10}, {"max_peers": 20}, 20),
            ({"max_peers": 10}, {"max_peers": 125}, 125),
        ],
    )
    def test_precedence(self, file_values, cli_values, expected):
        """Test command line beats file beats defaults."""
        merged = merge_sources(default_values(), file_values, cli_values)
        assert merged["max_peers"] == expected

    def test_lists_replaced_wholesale(self):
        """Test a list from a later source replaces, not extends."""
        merged = merge_sources(
            default_values(),
            {"add_peers": ["1.1.1.1"]},
            {"add_peers": ["2.2.2.2"]},
        )
        assert merged["add_peers"] == ["2.2.2.2"]
