"""GraphService: read-only graph queries returning ServiceResult.

Wraps a loaded :class:`GraphNetwork` for the CLI. Graph errors never
escape: each becomes an ``ok=False`` result carrying the error's code.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from graphnet.domain.errors import DataStructureError, GraphError, NodeNotFoundError
from graphnet.network import GraphNetwork
from graphnet.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from graphnet.config.models import GraphConfig

logger = logging.getLogger(__name__)


class GraphService:
    """Handles queries over a single in-memory graph."""

    def __init__(self, network: GraphNetwork) -> None:
        self._network = network

    @property
    def network(self) -> GraphNetwork:
        return self._network

    @classmethod
    def load(cls, path: Path, *, config: GraphConfig | None = None) -> GraphService:
        """Read a ``{"nodes": [...], "links": [...]}`` JSON file.

        The adjacency index is built before the service is returned.

        Raises:
            DataStructureError: The file is not UTF-8 encoded JSON.
            GraphError: The data fails validation or referential checks.
        """
        try:
            data: Any = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise DataStructureError(f"Invalid JSON in {path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise DataStructureError(f"{path} is not UTF-8 text: {exc.reason}") from exc
        network = GraphNetwork(data, config=config)
        logger.debug("Loaded %s", path)
        return cls(network)

    # ------------------------------------------------------------------
    # stats / validate
    # ------------------------------------------------------------------

    def stats(self) -> ServiceResult:
        """Node, edge, isolated-node and component counts."""
        stats = self._network.get_stats()
        seen: set[str] = set()
        components = 0
        for node in self._network.get_nodes():
            if node["id"] in seen:
                continue
            seen |= self._network.connected_component(node["id"])
            components += 1
        return ServiceResult(
            ok=True,
            op="stats",
            data={**stats.model_dump(), "components": components},
        )

    def validate(self) -> ServiceResult:
        """Report a graph that loaded cleanly. Loading already enforced every rule."""
        stats = self._network.get_stats()
        return ServiceResult(
            ok=True,
            op="validate",
            data={"valid": True, "node_count": stats.node_count, "edge_count": stats.edge_count},
        )

    # ------------------------------------------------------------------
    # traversal
    # ------------------------------------------------------------------

    def filter(self, node_id: str, *, depth: int | None = None) -> ServiceResult:
        """Nodes within *depth* hops of *node_id*, in store order."""
        op = "filter"
        try:
            visible = self._network.filter_by_node(node_id, depth)
        except GraphError as exc:
            return ServiceResult.failure(op, exc)
        except ValueError as exc:
            return _invalid_depth(op, exc)
        node_ids = [n["id"] for n in self._network.get_nodes() if n["id"] in visible]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "node_id": node_id,
                "depth": depth if depth is not None else self._network.config.graph.filter_depth,
                "count": len(node_ids),
                "node_ids": node_ids,
            },
        )

    def path(self, source_id: str, target_id: str) -> ServiceResult:
        """Unweighted shortest path between two nodes."""
        op = "path"
        for node_id in (source_id, target_id):
            if not self._network.has_node(node_id):
                return ServiceResult.failure(op, NodeNotFoundError(node_id))

        path = self._network.shortest_path(source_id, target_id)
        if path is None:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="NO_PATH",
                    message=f"No path between {source_id} and {target_id}",
                    detail={"source_id": source_id, "target_id": target_id},
                ),
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "source_id": source_id,
                "target_id": target_id,
                "length": len(path) - 1,
                "path": path,
                "edges": self._network.path_edges(path),
            },
        )

    def neighbors(self, node_id: str, *, depth: int | None = None) -> ServiceResult:
        """Depth-capped neighborhood with per-node depth and connecting edge."""
        op = "neighbors"
        if not self._network.has_node(node_id):
            return ServiceResult.failure(op, NodeNotFoundError(node_id))
        try:
            result = self._network.neighbors(node_id, depth, include_edges=True)
        except ValueError as exc:
            return _invalid_depth(op, exc)
        items = [
            {
                "id": n,
                "depth": result.depths[n],
                "edge": result.edges.get(n),
                "ratio": round(result.depth_ratio(n), 3),
            }
            for n in result.node_ids
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"node_id": node_id, "depth": result.depth, "count": len(items), "items": items},
        )

    def connections(self, node_id: str) -> ServiceResult:
        """A node plus every edge touching it."""
        op = "connections"
        if not self._network.has_node(node_id):
            return ServiceResult.failure(op, NodeNotFoundError(node_id))
        _, *edge_ids = self._network.connections(node_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={"node_id": node_id, "count": len(edge_ids), "edges": edge_ids},
        )


def _invalid_depth(op: str, exc: ValueError) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code="INVALID_DEPTH", message=str(exc)),
    )
