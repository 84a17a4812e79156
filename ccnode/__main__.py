#!/usr/bin/env python3
"""Allow ``python -m ccnode``."""

from __future__ import annotations

from ccnode.cli.main import run

if __name__ == "__main__":
    run()
