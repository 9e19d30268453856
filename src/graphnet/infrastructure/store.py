"""GraphStore: canonical node/edge collections with referential integrity.

Records are store-owned dicts. Nothing inside the store is ever handed
out: every accessor returns a deep copy, and every payload accepted is
copied before it is kept. Insertion order is preserved for both nodes
and edges (dicts are ordered), which keeps snapshots and the derived
adjacency index deterministic.

INVARIANT: every stored edge's source and target exist in the store.
INVARIANT: no stored edge is a self-loop.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from graphnet.domain.errors import (
    BulkValidationError,
    EdgeExistsError,
    EdgeNotFoundError,
    EdgeValidationError,
    GraphError,
    InvalidEdgeReferencesError,
    NodeExistsError,
    NodeNotFoundError,
    NodeValidationError,
)
from graphnet.domain.models import GraphStats
from graphnet.domain.types import DEFAULT_EDGE_WEIGHT, DEFAULT_LINE_TYPE
from graphnet.domain.validation import (
    normalize_edge,
    parse_graph_data,
    validate_edge,
    validate_edge_updates,
    validate_node,
    validate_node_updates,
)

if TYPE_CHECKING:
    from graphnet.domain.models import GraphData, PositionHook

logger = logging.getLogger(__name__)

type Record = dict[str, Any]
type Change = tuple[str, Record, Record]


class GraphStore:
    """Owns the node and edge collections.

    Single-entity mutations validate fully before touching state. Bulk
    updates run in two phases: validate every item and build the mutation
    closures, then apply them in order. A phase-1 failure mutates nothing.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, Record] = {}
        self._edges: dict[str, Record] = {}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def has_edge(self, edge_id: str) -> bool:
        return edge_id in self._edges

    def get_node(self, node_id: str) -> Record | None:
        node = self._nodes.get(node_id)
        return copy.deepcopy(node) if node is not None else None

    def get_edge(self, edge_id: str) -> Record | None:
        edge = self._edges.get(edge_id)
        return copy.deepcopy(edge) if edge is not None else None

    def get_nodes(self) -> list[Record]:
        return copy.deepcopy(list(self._nodes.values()))

    def get_edges(self) -> list[Record]:
        return copy.deepcopy(list(self._edges.values()))

    def node_ids(self) -> list[str]:
        return list(self._nodes)

    def edge_ids(self) -> list[str]:
        return list(self._edges)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def get_data(self) -> dict[str, list[Record]]:
        """Full snapshot as ``{"nodes": [...], "links": [...]}``."""
        return {"nodes": self.get_nodes(), "links": self.get_edges()}

    def find_edge(self, source_id: str, target_id: str) -> str | None:
        """Id of the first edge running *source_id* -> *target_id*, if any."""
        for edge_id, edge in self._edges.items():
            if edge["source"] == source_id and edge["target"] == target_id:
                return edge_id
        return None

    def incident_edge_ids(self, node_id: str) -> list[str]:
        """Ids of edges touching *node_id*, in insertion order."""
        return [
            edge_id
            for edge_id, edge in self._edges.items()
            if edge["source"] == node_id or edge["target"] == node_id
        ]

    def get_stats(self) -> GraphStats:
        connected: set[str] = set()
        for edge in self._edges.values():
            connected.add(edge["source"])
            connected.add(edge["target"])
        return GraphStats(
            node_count=len(self._nodes),
            edge_count=len(self._edges),
            isolated_nodes=len(self._nodes) - len(connected),
        )

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(self, payload: Mapping[str, Any], *, skip_validation: bool = False) -> Record:
        """Insert a node. Returns a copy of the stored record.

        Raises:
            NodeValidationError: Malformed payload (unless *skip_validation*).
            NodeExistsError: A node with this id already exists. Always checked.
        """
        if not skip_validation:
            validate_node(payload)
        node_id = payload["id"]
        if node_id in self._nodes:
            raise NodeExistsError(node_id)

        record = copy.deepcopy(dict(payload))
        self._nodes[node_id] = record
        logger.debug("Added node %s", node_id)
        return copy.deepcopy(record)

    def delete_node(self, node_id: str) -> tuple[Record, list[Record]]:
        """Remove a node and cascade to every edge touching it.

        Returns the removed node and the removed edges, in edge order.
        """
        if node_id not in self._nodes:
            raise NodeNotFoundError(node_id)

        removed_edges = [self._edges.pop(edge_id) for edge_id in self.incident_edge_ids(node_id)]
        node = self._nodes.pop(node_id)
        logger.debug("Deleted node %s and %d connected edges", node_id, len(removed_edges))
        return node, removed_edges

    def update_node(self, node_id: str, updates: Mapping[str, Any]) -> tuple[Record, Record]:
        """Merge *updates* into a node. Returns ``(before, after)`` copies."""
        apply = self._prepare_node_update(node_id, updates, skip_validation=False)
        _, before, after = apply()
        return before, after

    def _prepare_node_update(
        self,
        node_id: Any,
        updates: Mapping[str, Any],
        *,
        skip_validation: bool,
    ) -> Callable[[], Change]:
        """Validate a node update and return the closure that applies it."""
        if node_id not in self._nodes:
            raise NodeNotFoundError(node_id)
        if not skip_validation:
            validate_node_updates(node_id, updates)
        changes = {k: copy.deepcopy(v) for k, v in updates.items() if k != "id"}

        def apply() -> Change:
            record = self._nodes[node_id]
            before = copy.deepcopy(record)
            record.update(changes)
            return node_id, before, copy.deepcopy(record)

        return apply

    def update_nodes(
        self,
        items: Sequence[Mapping[str, Any]],
        *,
        skip_validation: bool = False,
    ) -> list[Change]:
        """Apply a batch of ``{"id": ..., **updates}`` items all-or-nothing.

        Every item is validated before any is applied. Existence of every
        target id is checked even when *skip_validation* is set.
        """
        closures = self._prepare_batch(
            "node",
            items,
            lambda item: self._prepare_node_update(
                item.get("id"), item, skip_validation=skip_validation
            ),
            NodeValidationError,
        )
        return [apply() for apply in closures]

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def add_edge(self, payload: Mapping[str, Any], *, skip_validation: bool = False) -> Record:
        """Insert an edge. Returns a copy of the stored record.

        Raises:
            EdgeValidationError: Malformed payload (unless *skip_validation*).
            EdgeExistsError: An edge with this id already exists.
            InvalidEdgeReferencesError: Source and/or target node is missing;
                names every missing id.
        """
        if not isinstance(payload, Mapping):
            raise EdgeValidationError("Invalid edge data. Must have source and target.", payload)
        edge = normalize_edge(payload)
        if not skip_validation:
            validate_edge(edge)

        edge_id = edge["id"]
        if edge_id in self._edges:
            raise EdgeExistsError(edge_id)

        source, target = edge["source"], edge["target"]
        missing = [n for n in dict.fromkeys((source, target)) if n not in self._nodes]
        if missing:
            raise InvalidEdgeReferencesError(source, target, missing)

        if edge.get("weight") is None:
            edge["weight"] = DEFAULT_EDGE_WEIGHT
        if edge.get("line_type") is None:
            edge["line_type"] = str(DEFAULT_LINE_TYPE)

        record = copy.deepcopy(edge)
        self._edges[edge_id] = record
        logger.debug("Added edge %s (%s -> %s)", edge_id, source, target)
        return copy.deepcopy(record)

    def delete_edge(self, edge_id: str) -> Record:
        """Remove an edge. Returns the removed record."""
        if edge_id not in self._edges:
            raise EdgeNotFoundError(edge_id)
        edge = self._edges.pop(edge_id)
        logger.debug("Deleted edge %s", edge_id)
        return edge

    def update_edge(self, edge_id: str, updates: Mapping[str, Any]) -> tuple[Record, Record]:
        """Merge *updates* into an edge. Returns ``(before, after)`` copies."""
        apply = self._prepare_edge_update(edge_id, updates, skip_validation=False)
        _, before, after = apply()
        return before, after

    def _prepare_edge_update(
        self,
        edge_id: Any,
        updates: Mapping[str, Any],
        *,
        skip_validation: bool,
    ) -> Callable[[], Change]:
        """Validate an edge update and return the closure that applies it."""
        if edge_id not in self._edges:
            raise EdgeNotFoundError(edge_id)
        if not skip_validation:
            validate_edge_updates(self._edges[edge_id], updates)
        changes = {
            k: copy.deepcopy(v) for k, v in updates.items() if k not in ("id", "source", "target")
        }

        def apply() -> Change:
            record = self._edges[edge_id]
            before = copy.deepcopy(record)
            record.update(changes)
            return edge_id, before, copy.deepcopy(record)

        return apply

    def update_edges(
        self,
        items: Sequence[Mapping[str, Any]],
        *,
        skip_validation: bool = False,
    ) -> list[Change]:
        """Edge counterpart of :meth:`update_nodes`. Source/target are immutable."""
        closures = self._prepare_batch(
            "edge",
            items,
            lambda item: self._prepare_edge_update(
                item.get("id"), item, skip_validation=skip_validation
            ),
            EdgeValidationError,
        )
        return [apply() for apply in closures]

    # ------------------------------------------------------------------
    # Whole-graph operations
    # ------------------------------------------------------------------

    def replace_data(
        self,
        data: GraphData | Mapping[str, Any],
        *,
        skip_validation: bool = False,
        position_hook: PositionHook | None = None,
    ) -> int:
        """Atomically swap the entire node/edge collection.

        The incoming data is loaded into a staging store first; the live
        collections are replaced only if every node and edge loads. When a
        *position_hook* is given, positions for node ids that recur are
        carried across the swap. Returns the number of preserved positions.
        """
        graph = parse_graph_data(data)

        staging = GraphStore()
        for node in graph.nodes:
            staging.add_node(node, skip_validation=skip_validation)
        for edge in graph.links:
            staging.add_edge(edge, skip_validation=skip_validation)

        positions: dict[str, Any] = {}
        if position_hook is not None:
            positions = dict(position_hook.capture(self.node_ids()))

        self._nodes, self._edges = staging._nodes, staging._edges

        preserved = {k: v for k, v in positions.items() if k in self._nodes}
        if position_hook is not None and preserved:
            position_hook.restore(preserved)

        logger.debug(
            "Replaced data with %d nodes and %d edges (%d positions preserved)",
            len(self._nodes),
            len(self._edges),
            len(preserved),
        )
        return len(preserved)

    def clear(self) -> tuple[int, int]:
        """Empty both collections. Returns the cleared ``(nodes, edges)`` counts."""
        counts = (len(self._nodes), len(self._edges))
        self._nodes = {}
        self._edges = {}
        return counts

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _prepare_batch(
        kind: str,
        items: Sequence[Mapping[str, Any]],
        prepare: Callable[[Mapping[str, Any]], Callable[[], Change]],
        invalid: type[NodeValidationError] | type[EdgeValidationError],
    ) -> list[Callable[[], Change]]:
        """Phase 1 of a bulk update: validate all, collect every failure."""
        closures: list[Callable[[], Change]] = []
        failures: list[GraphError] = []
        failed_ids: list[str] = []

        for item in items:
            item_id = item.get("id") if isinstance(item, Mapping) else None
            if not isinstance(item_id, str) or not item_id:
                raise invalid(f"{kind.capitalize()} update must include a valid ID", item)
            try:
                closures.append(prepare(item))
            except GraphError as exc:
                failures.append(exc)
                failed_ids.append(item_id)

        if failures:
            raise BulkValidationError(kind, failures, failed_ids)
        return closures
