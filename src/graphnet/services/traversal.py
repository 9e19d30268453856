"""TraversalEngine: BFS algorithms over the adjacency index.

Every traversal treats the graph as undirected (an edge connects its
endpoints in both directions) and is read-only with respect to the store.
Results reflect the index as last built; see
:class:`~graphnet.infrastructure.graph.engine.AdjacencyIndex` for the
refresh contract.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

from graphnet.domain.errors import NodeNotFoundError
from graphnet.domain.models import NeighborResult

if TYPE_CHECKING:
    from graphnet.infrastructure.graph.engine import AdjacencyIndex

logger = logging.getLogger(__name__)


class TraversalEngine:
    """Depth-limited reachability, shortest path and neighborhood queries."""

    def __init__(self, index: AdjacencyIndex) -> None:
        self._index = index

    def _warn_if_stale(self, op: str) -> None:
        if self._index.stale:
            logger.warning(
                "%s on a stale adjacency index; call update_graph_structure() after "
                "topology changes",
                op,
            )

    @staticmethod
    def _check_depth(depth: int) -> None:
        if depth < 0:
            raise ValueError(f"depth must be >= 0, got {depth}")

    # ------------------------------------------------------------------
    # filter_by_node: depth-limited reachability
    # ------------------------------------------------------------------

    def filter_by_node(self, node_id: str, depth: int) -> set[str]:
        """Ids reachable from *node_id* within *depth* hops (seed included).

        Raises:
            NodeNotFoundError: *node_id* is not in the index.
        """
        self._check_depth(depth)
        self._warn_if_stale("filter_by_node")
        if node_id not in self._index:
            raise NodeNotFoundError(node_id)

        visited: set[str] = {node_id}
        queue: deque[tuple[str, int]] = deque([(node_id, 0)])

        while queue:
            current, d = queue.popleft()
            if d >= depth:
                continue
            for neighbor in self._index.neighbors(current):
                if neighbor not in visited:
                    visited.add(neighbor)
                    queue.append((neighbor, d + 1))

        logger.debug("Filtered to %d nodes from %s with depth %d", len(visited), node_id, depth)
        return visited

    def connected_component(self, node_id: str) -> set[str]:
        """Every id reachable from *node_id* at any depth."""
        if node_id not in self._index:
            raise NodeNotFoundError(node_id)
        return self.filter_by_node(node_id, max(len(self._index.graph) - 1, 0))

    # ------------------------------------------------------------------
    # shortest_path: unweighted BFS
    # ------------------------------------------------------------------

    def shortest_path(self, source_id: str, target_id: str) -> list[str] | None:
        """First-discovered shortest path from *source_id* to *target_id*.

        Ties are broken by adjacency insertion order. Returns None when the
        endpoints are equal, either is unknown, or they are disconnected.
        """
        self._warn_if_stale("shortest_path")
        if source_id == target_id:
            return None
        if source_id not in self._index or target_id not in self._index:
            return None

        parent: dict[str, str | None] = {source_id: None}
        queue: deque[str] = deque([source_id])

        while queue:
            current = queue.popleft()
            if current == target_id:
                path: list[str] = []
                node: str | None = target_id
                while node is not None:
                    path.append(node)
                    node = parent[node]
                path.reverse()
                return path
            for neighbor in self._index.neighbors(current):
                if neighbor not in parent:
                    parent[neighbor] = current
                    queue.append(neighbor)

        return None

    def path_edges(self, path: list[str]) -> list[str]:
        """Connecting edge id for each consecutive pair in *path*."""
        edge_ids: list[str] = []
        for a, b in zip(path, path[1:]):
            edge_id = self._index.edge_between(a, b)
            if edge_id is not None:
                edge_ids.append(edge_id)
        return edge_ids

    # ------------------------------------------------------------------
    # neighbors: depth-capped expansion with per-node depth
    # ------------------------------------------------------------------

    def neighbors(
        self,
        node_id: str,
        depth: int = 1,
        *,
        include_edges: bool = False,
    ) -> NeighborResult:
        """Expand outward from *node_id* up to *depth* hops.

        The seed is reported first at depth 0, followed by every newly
        discovered node in BFS order. With *include_edges*, each discovered
        node maps to the edge it was reached through.
        """
        self._check_depth(depth)
        self._warn_if_stale("neighbors")

        node_ids: list[str] = [node_id]
        depths: dict[str, int] = {node_id: 0}
        edges: dict[str, str] = {}
        queue: deque[tuple[str, int]] = deque([(node_id, 0)])

        while queue:
            current, d = queue.popleft()
            if d >= depth:
                continue
            for neighbor in self._index.neighbors(current):
                if neighbor in depths:
                    continue
                depths[neighbor] = d + 1
                node_ids.append(neighbor)
                if include_edges:
                    edge_id = self._index.edge_between(current, neighbor)
                    if edge_id is not None:
                        edges[neighbor] = edge_id
                queue.append((neighbor, d + 1))

        return NeighborResult(
            node_id=node_id,
            depth=depth,
            node_ids=node_ids,
            depths=depths,
            edges=edges,
        )

    # ------------------------------------------------------------------
    # connections: node plus incident edges
    # ------------------------------------------------------------------

    def connections(self, node_id: str) -> list[str]:
        """``[node_id, *incident edge ids]`` (depth 1 only)."""
        self._warn_if_stale("connections")
        return [node_id, *self._index.incident_edges(node_id)]
