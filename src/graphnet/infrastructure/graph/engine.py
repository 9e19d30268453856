"""AdjacencyIndex: derived NetworkX read-model over the store's topology.

The index is a manually invalidated cache: it is rebuilt wholesale by
:meth:`AdjacencyIndex.update_graph_structure` and never patched
incrementally. Store mutations do not refresh it. Whoever mutates
topology must mark it stale and call ``update_graph_structure`` before
relying on traversal results; a stale index still answers queries, but
from the topology it was last built with.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import networkx as nx

logger = logging.getLogger(__name__)

# Undirected multigraph keyed by edge id, so parallel edges between the
# same pair of nodes stay distinct.
type _Graph = nx.MultiGraph


class AdjacencyIndex:
    """Undirected adjacency, incidence and endpoint lookups for traversal."""

    def __init__(self) -> None:
        self._graph: _Graph = nx.MultiGraph()
        self._node_to_edges: dict[str, list[str]] = {}
        self._edge_to_nodes: dict[str, tuple[str, str]] = {}
        self._built = False
        self._stale = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_built(self) -> bool:
        """Whether ``update_graph_structure`` has been called at least once."""
        return self._built

    @property
    def stale(self) -> bool:
        """True when topology changed since the last rebuild (or never built)."""
        return self._stale or not self._built

    def mark_stale(self) -> None:
        """Record that the source topology changed. Does not rebuild."""
        self._stale = True

    def update_graph_structure(
        self,
        node_ids: Iterable[str],
        edges: Iterable[Mapping[str, Any]],
    ) -> None:
        """Rebuild every lookup from *node_ids* and *edges*.

        Loads all nodes first (so isolated nodes are visible to traversal),
        then edges in order. Edges with an endpoint outside *node_ids* are
        kept in the endpoint map but contribute no adjacency.
        """
        g: _Graph = nx.MultiGraph()
        node_to_edges: dict[str, list[str]] = {}
        edge_to_nodes: dict[str, tuple[str, str]] = {}

        for node_id in node_ids:
            g.add_node(node_id)
            node_to_edges[node_id] = []

        for edge in edges:
            edge_id, source, target = edge["id"], edge["source"], edge["target"]
            edge_to_nodes[edge_id] = (source, target)
            if source not in node_to_edges or target not in node_to_edges:
                logger.debug("Edge %s references unknown nodes; not indexed", edge_id)
                continue
            node_to_edges[source].append(edge_id)
            node_to_edges[target].append(edge_id)
            g.add_edge(source, target, key=edge_id)

        self._graph = g
        self._node_to_edges = node_to_edges
        self._edge_to_nodes = edge_to_nodes
        self._built = True
        self._stale = False
        logger.debug(
            "Rebuilt adjacency index: %d nodes, %d edges",
            g.number_of_nodes(),
            g.number_of_edges(),
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def graph(self) -> _Graph:
        """The underlying multigraph. Treat as read-only."""
        return self._graph

    @property
    def node_to_edges(self) -> dict[str, list[str]]:
        return {k: list(v) for k, v in self._node_to_edges.items()}

    @property
    def edge_to_nodes(self) -> dict[str, tuple[str, str]]:
        return dict(self._edge_to_nodes)

    @property
    def adjacency(self) -> dict[str, set[str]]:
        return {n: set(self._graph.adj[n]) for n in self._graph.nodes}

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._node_to_edges

    def neighbors(self, node_id: str) -> list[str]:
        """Neighbor ids in first-connected order; empty for unknown nodes."""
        if node_id not in self._graph:
            return []
        return list(self._graph.adj[node_id])

    def incident_edges(self, node_id: str) -> list[str]:
        return list(self._node_to_edges.get(node_id, []))

    def endpoints(self, edge_id: str) -> tuple[str, str] | None:
        return self._edge_to_nodes.get(edge_id)

    def edge_between(self, node_a: str, node_b: str) -> str | None:
        """First edge (by insertion order) joining the two nodes in either direction."""
        for edge_id in self._node_to_edges.get(node_a, []):
            source, target = self._edge_to_nodes[edge_id]
            if (source, target) in ((node_a, node_b), (node_b, node_a)):
                return edge_id
        return None
