"""graphnet: in-memory graph store with transactions and BFS traversal."""

from __future__ import annotations

__version__ = "0.4.0"

from graphnet.network import GraphNetwork

__all__ = ["GraphNetwork", "__version__"]
