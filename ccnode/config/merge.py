"""Precedence merging of configuration sources.

Sources are flat ``field -> value`` mappings that contain only the fields the
source actually set. Later sources win field by field:
defaults -> configuration file -> environment/command line.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping


def overlay(base: Mapping[str, Any], update: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``base`` with every field present in ``update`` replaced.

    Values are copied so list fields of the result never alias a source.
    """
    result = copy.deepcopy(dict(base))
    for key, value in update.items():
        result[key] = copy.deepcopy(value)
    return result


def merge_sources(
    defaults: Mapping[str, Any],
    file_values: Mapping[str, Any],
    cli_values: Mapping[str, Any],
) -> dict[str, Any]:
    """Merge defaults, file values and command-line values in precedence order."""
    return overlay(overlay(defaults, file_values), cli_values)
