"""ccNode - configuration and outbound routing for a peer-to-peer node daemon."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
