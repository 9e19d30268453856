"""Infrastructure layer: the canonical store and derived indexes."""

from graphnet.infrastructure.graph.engine import AdjacencyIndex
from graphnet.infrastructure.store import GraphStore

__all__ = ["AdjacencyIndex", "GraphStore"]
