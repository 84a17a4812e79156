"""Filesystem path expansion for path-valued options."""

from __future__ import annotations

import os
from typing import Final

# Fields holding filesystem paths; expanded before use.
PATH_FIELDS: Final[tuple[str, ...]] = (
    "config_file",
    "data_dir",
    "log_dir",
    "rpc_cert",
    "rpc_key",
    "cpu_profile",
)


def clean_and_expand_path(path: str) -> str:
    """Expand a leading ``~`` and environment variables, then normalize.

    Only POSIX-style ``$VAR`` / ``${VAR}`` references are expanded on every
    platform; unknown variables are left as written. The empty string stays
    empty so unset optional paths remain unset.
    """
    if not path:
        return path
    if path.startswith("~"):
        path = os.path.expanduser(path)
    return os.path.normpath(os.path.expandvars(path))
