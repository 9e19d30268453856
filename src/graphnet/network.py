"""GraphNetwork: the facade that wires store, index, traversal and transactions.

Every mutating call follows the same sequence:

1. perform the store operation (graph errors propagate unmodified),
2. record an audit entry when a transaction is active,
3. mark the adjacency index stale if topology changed,
4. emit notification events.

The adjacency index is *not* refreshed automatically. Call
:meth:`GraphNetwork.update_graph_structure` after topology changes and
before relying on traversal results.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from graphnet.config.models import GraphConfig
from graphnet.domain.errors import (
    EdgeExistsError,
    GraphError,
    NodeExistsError,
    NodeNotFoundError,
)
from graphnet.domain.models import GraphStats, MergeResult, NeighborResult
from graphnet.domain.types import ConflictResolution, EventType, OperationType
from graphnet.domain.validation import EDGE_IDENTITY_FIELDS, default_edge_id, parse_graph_data
from graphnet.infrastructure.graph.engine import AdjacencyIndex
from graphnet.infrastructure.store import GraphStore, Record
from graphnet.plugins.event_bus import EventBus, EventCallback
from graphnet.plugins.manager import PluginManager
from graphnet.services.transaction import TransactionCoordinator, TransactionOperation
from graphnet.services.traversal import TraversalEngine

if TYPE_CHECKING:
    from graphnet.domain.models import (
        GraphData,
        PositionHook,
        TransactionStatus,
        TransactionSummary,
    )

logger = logging.getLogger(__name__)


class GraphNetwork:
    """In-memory graph with transactional mutations and BFS traversal.

    Parameters:
        data: Optional initial graph data. When given it is loaded and the
            adjacency index is built from it.
        config: Graph configuration (defaults baked into the section models).
        plugin_manager: Plugin manager used for hook dispatch. A fresh one
            is created when omitted; entry points are loaded only when
            ``events.load_entrypoints`` is enabled.
    """

    def __init__(
        self,
        data: GraphData | Mapping[str, Any] | None = None,
        *,
        config: GraphConfig | None = None,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self._config = config or GraphConfig()
        self._store = GraphStore()
        self._index = AdjacencyIndex()
        self._traversal = TraversalEngine(self._index)
        self._coordinator = TransactionCoordinator(self._store)

        pm = plugin_manager or PluginManager()
        if self._config.events.load_entrypoints and not pm.is_loaded:
            pm.discover_and_load()
        self._bus = EventBus(pm, enabled=self._config.events.enabled)

        if data is not None:
            self.set_data(data)
        self.update_graph_structure()

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    @property
    def config(self) -> GraphConfig:
        return self._config

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def index(self) -> AdjacencyIndex:
        """The derived adjacency index. Read-only use."""
        return self._index

    def subscribe(
        self,
        event_type: EventType | str,
        callback: EventCallback,
        *,
        once: bool = False,
    ) -> Callable[[], None]:
        """Subscribe *callback* to *event_type*. Returns an unsubscribe function."""
        return self._bus.subscribe(event_type, callback, once=once)

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(self, node: Mapping[str, Any], *, skip_validation: bool = False) -> Record:
        """Add a node. Returns a copy of the stored record."""
        record = self._store.add_node(node, skip_validation=skip_validation)
        self._coordinator.record(OperationType.ADD_NODE, record["id"], None, record)
        self._index.mark_stale()
        self._bus.emit(EventType.NODE_ADDED, ids=[record["id"]], after=record)
        return record

    def delete_node(self, node_id: str) -> bool:
        """Delete a node and every edge touching it.

        Emits ``nodeRemoved`` followed by one ``linkRemoved`` per cascaded edge.
        """
        node, removed_edges = self._store.delete_node(node_id)
        self._coordinator.record(
            OperationType.DELETE_NODE,
            node_id,
            {"node": node, "edges": removed_edges},
            None,
        )
        self._index.mark_stale()
        self._bus.emit(
            EventType.NODE_REMOVED,
            ids=[node_id],
            before=node,
            removed_edges=[e["id"] for e in removed_edges],
        )
        for edge in removed_edges:
            self._bus.emit(EventType.LINK_REMOVED, ids=[edge["id"]], before=edge, cascade=True)
        return True

    def remove_node(self, node_id: str) -> bool:
        """Alias of :meth:`delete_node`."""
        return self.delete_node(node_id)

    def update_node(self, node_id: str, updates: Mapping[str, Any]) -> Record:
        """Merge *updates* into a node. Returns the updated record."""
        before, after = self._store.update_node(node_id, updates)
        self._coordinator.record(OperationType.UPDATE_NODE, node_id, before, after)
        self._bus.emit(EventType.NODE_UPDATED, ids=[node_id], before=before, after=after)
        return after

    def update_nodes(
        self,
        items: Sequence[Mapping[str, Any]],
        *,
        skip_validation: bool = False,
    ) -> list[Record]:
        """Update many nodes all-or-nothing. Each item is ``{"id": ..., **updates}``."""
        changes = self._store.update_nodes(items, skip_validation=skip_validation)
        ids = [node_id for node_id, _, _ in changes]
        befores = [before for _, before, _ in changes]
        afters = [after for _, _, after in changes]

        self._coordinator.record(
            OperationType.UPDATE_NODE, f"bulk-{len(changes)}-nodes", befores, afters
        )
        for node_id, before, after in changes:
            self._bus.emit(EventType.NODE_UPDATED, ids=[node_id], before=before, after=after)
        self._bus.emit(EventType.NODES_BULK_UPDATED, ids=ids, before=befores, after=afters)
        logger.debug("Bulk updated %d nodes", len(changes))
        return afters

    def get_node(self, node_id: str) -> Record | None:
        return self._store.get_node(node_id)

    def has_node(self, node_id: str) -> bool:
        return self._store.has_node(node_id)

    def get_nodes(self) -> list[Record]:
        return self._store.get_nodes()

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def add_edge(self, edge: Mapping[str, Any], *, skip_validation: bool = False) -> Record:
        """Add an edge. The id defaults to ``"source-target"`` when omitted."""
        record = self._store.add_edge(edge, skip_validation=skip_validation)
        self._coordinator.record(OperationType.ADD_EDGE, record["id"], None, record)
        self._index.mark_stale()
        self._bus.emit(EventType.LINK_ADDED, ids=[record["id"]], after=record)
        return record

    def add_link(self, link: Mapping[str, Any]) -> Record:
        """Legacy form of :meth:`add_edge`; an empty id is replaced by the default."""
        edge = dict(link)
        if not edge.get("id"):
            edge["id"] = default_edge_id(str(edge.get("source")), str(edge.get("target")))
        return self.add_edge(edge)

    def delete_edge(self, edge_id: str) -> bool:
        edge = self._store.delete_edge(edge_id)
        self._coordinator.record(OperationType.DELETE_EDGE, edge_id, edge, None)
        self._index.mark_stale()
        self._bus.emit(EventType.LINK_REMOVED, ids=[edge_id], before=edge)
        return True

    def remove_link(self, source_id: str, target_id: str) -> bool:
        """Delete the first edge running *source_id* -> *target_id*.

        Returns False when no such edge exists.
        """
        edge_id = self._store.find_edge(source_id, target_id)
        if edge_id is None:
            return False
        return self.delete_edge(edge_id)

    def update_edge(self, edge_id: str, updates: Mapping[str, Any]) -> Record:
        before, after = self._store.update_edge(edge_id, updates)
        self._coordinator.record(OperationType.UPDATE_EDGE, edge_id, before, after)
        self._bus.emit(EventType.LINK_UPDATED, ids=[edge_id], before=before, after=after)
        return after

    def update_edges(
        self,
        items: Sequence[Mapping[str, Any]],
        *,
        skip_validation: bool = False,
    ) -> list[Record]:
        """Edge counterpart of :meth:`update_nodes`."""
        changes = self._store.update_edges(items, skip_validation=skip_validation)
        ids = [edge_id for edge_id, _, _ in changes]
        befores = [before for _, before, _ in changes]
        afters = [after for _, _, after in changes]

        self._coordinator.record(
            OperationType.UPDATE_EDGE, f"bulk-{len(changes)}-edges", befores, afters
        )
        for edge_id, before, after in changes:
            self._bus.emit(EventType.LINK_UPDATED, ids=[edge_id], before=before, after=after)
        self._bus.emit(EventType.EDGES_BULK_UPDATED, ids=ids, before=befores, after=afters)
        logger.debug("Bulk updated %d edges", len(changes))
        return afters

    def get_edge(self, edge_id: str) -> Record | None:
        return self._store.get_edge(edge_id)

    def has_edge(self, edge_id: str) -> bool:
        return self._store.has_edge(edge_id)

    def get_links(self) -> list[Record]:
        return self._store.get_edges()

    # ------------------------------------------------------------------
    # Whole-graph data
    # ------------------------------------------------------------------

    def get_data(self) -> dict[str, list[Record]]:
        """Deep-copied ``{"nodes": [...], "links": [...]}`` snapshot."""
        return self._store.get_data()

    def set_data(
        self,
        data: GraphData | Mapping[str, Any],
        *,
        skip_validation: bool = False,
        position_hook: PositionHook | None = None,
    ) -> None:
        """Replace the whole graph atomically.

        On failure the previous graph is left untouched.
        """
        previous_nodes, previous_edges = self._store.node_count, self._store.edge_count
        before = self._store.get_data() if self._coordinator.is_active else None

        preserved = self._store.replace_data(
            data, skip_validation=skip_validation, position_hook=position_hook
        )
        after = self._store.get_data() if self._coordinator.is_active else None
        self._coordinator.record(OperationType.SET_DATA, "data", before, after)
        self._index.mark_stale()
        self._bus.emit(
            EventType.DATA_LOADED,
            node_count=self._store.node_count,
            edge_count=self._store.edge_count,
            previous_node_count=previous_nodes,
            previous_edge_count=previous_edges,
            preserved_positions=preserved,
        )

    def replace_data(
        self,
        data: GraphData | Mapping[str, Any],
        *,
        skip_validation: bool = False,
        position_hook: PositionHook | None = None,
    ) -> None:
        """Alias of :meth:`set_data`."""
        self.set_data(data, skip_validation=skip_validation, position_hook=position_hook)

    def merge_data(
        self,
        data: GraphData | Mapping[str, Any],
        *,
        node_conflict_resolution: ConflictResolution | str | None = None,
        edge_conflict_resolution: ConflictResolution | str | None = None,
    ) -> MergeResult:
        """Merge *data* into the current graph, node by node then edge by edge.

        Conflict policies default to the ``[merge]`` configuration:

        - ``update``: merge the incoming fields into the existing item.
        - ``preserve``: keep the existing item and count it as skipped.
        - ``error``: raise ``NodeExistsError``/``EdgeExistsError`` and stop.

        The merge is not atomic. Items applied before an ``error`` abort
        stay applied; wrap the call in :meth:`transaction` to undo them.
        Any other per-item failure is collected in ``MergeResult.errors``
        and processing continues.
        """
        graph = parse_graph_data(data)
        node_policy = ConflictResolution(
            node_conflict_resolution or self._config.merge.node_conflict_resolution
        )
        edge_policy = ConflictResolution(
            edge_conflict_resolution or self._config.merge.edge_conflict_resolution
        )
        result = MergeResult()

        if self._coordinator.is_active:
            self._coordinator.record(
                OperationType.MERGE_DATA, "merge", self._store.get_data(), graph.model_dump()
            )

        for node in graph.nodes:
            node_id = node.get("id")
            if isinstance(node_id, str) and self._store.has_node(node_id):
                if node_policy is ConflictResolution.ERROR:
                    raise NodeExistsError(node_id)
                if node_policy is ConflictResolution.PRESERVE:
                    result.nodes_skipped += 1
                    continue
            try:
                if isinstance(node_id, str) and self._store.has_node(node_id):
                    self.update_node(node_id, node)
                    result.nodes_updated += 1
                else:
                    self.add_node(node)
                    result.nodes_added += 1
            except GraphError as exc:
                result.errors.append(f"Node {node_id}: {exc.message}")

        for edge in graph.links:
            source, target = edge.get("source"), edge.get("target")
            edge_id = edge.get("id") or default_edge_id(str(source), str(target))
            if self._store.has_edge(edge_id):
                if edge_policy is ConflictResolution.ERROR:
                    raise EdgeExistsError(edge_id)
                if edge_policy is ConflictResolution.PRESERVE:
                    result.edges_skipped += 1
                    continue
            try:
                if self._store.has_edge(edge_id):
                    updates = {k: v for k, v in edge.items() if k not in EDGE_IDENTITY_FIELDS}
                    self.update_edge(edge_id, updates)
                    result.edges_updated += 1
                else:
                    self.add_edge({**edge, "id": edge_id})
                    result.edges_added += 1
            except GraphError as exc:
                result.errors.append(f"Edge {source}-{target}: {exc.message}")

        self._index.mark_stale()
        self._bus.emit(EventType.DATA_MERGED, **result.model_dump())
        logger.debug(
            "Merged data: %d/%d nodes added/updated, %d/%d edges added/updated, %d errors",
            result.nodes_added,
            result.nodes_updated,
            result.edges_added,
            result.edges_updated,
            len(result.errors),
        )
        return result

    def clear_data(self) -> None:
        before = self._store.get_data() if self._coordinator.is_active else None
        node_count, edge_count = self._store.clear()
        self._coordinator.record(OperationType.CLEAR_DATA, "data", before, None)
        self._index.mark_stale()
        self._bus.emit(EventType.DATA_CLEARED, node_count=node_count, edge_count=edge_count)
        logger.debug("Cleared %d nodes and %d edges", node_count, edge_count)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def start_transaction(self) -> str:
        """Begin a transaction. Raises TransactionStateError if one is active."""
        return self._coordinator.start()

    def commit_transaction(self) -> TransactionSummary:
        summary = self._coordinator.commit()
        self._bus.emit(EventType.TRANSACTION_COMMITTED, ids=[summary.id], **summary.model_dump())
        return summary

    def rollback_transaction(self) -> TransactionSummary:
        """Restore the graph to its state at ``start_transaction``."""
        try:
            summary = self._coordinator.rollback()
        finally:
            self._index.mark_stale()
        self._bus.emit(
            EventType.TRANSACTION_ROLLED_BACK, ids=[summary.id], **summary.model_dump()
        )
        return summary

    def get_transaction_status(self) -> TransactionStatus | None:
        return self._coordinator.get_status()

    def is_in_transaction(self) -> bool:
        return self._coordinator.is_active

    @property
    def transaction_operations(self) -> list[TransactionOperation]:
        """Audit log of the active transaction (empty when idle)."""
        return self._coordinator.operations

    @contextmanager
    def transaction(self) -> Iterator[str]:
        """Run a block inside a transaction.

        Commits when the block exits normally and rolls back when it
        raises; the exception is re-raised after the rollback.

        Usage::

            with network.transaction():
                network.add_node({"id": "a", "name": "A"})
                network.add_edge({"source": "a", "target": "b"})
        """
        transaction_id = self.start_transaction()
        try:
            yield transaction_id
        except BaseException:
            self.rollback_transaction()
            raise
        self.commit_transaction()

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def update_graph_structure(self) -> None:
        """Rebuild the adjacency index from the current store contents."""
        self._index.update_graph_structure(self._store.node_ids(), self._store.get_edges())

    def filter_by_node(self, node_id: str, depth: int | None = None) -> set[str]:
        """Node ids within *depth* hops of *node_id* (default ``graph.filter_depth``).

        Raises:
            NodeNotFoundError: *node_id* is not in the store.
        """
        if not self._store.has_node(node_id):
            raise NodeNotFoundError(node_id)
        if depth is None:
            depth = self._config.graph.filter_depth
        return self._traversal.filter_by_node(node_id, depth)

    def shortest_path(self, source_id: str, target_id: str) -> list[str] | None:
        return self._traversal.shortest_path(source_id, target_id)

    def path_edges(self, path: Sequence[str]) -> list[str]:
        """Edge ids joining each consecutive pair of *path*."""
        return self._traversal.path_edges(list(path))

    def neighbors(
        self,
        node_id: str,
        depth: int | None = None,
        *,
        include_edges: bool = False,
    ) -> NeighborResult:
        if depth is None:
            depth = self._config.graph.neighbor_depth
        return self._traversal.neighbors(node_id, depth, include_edges=include_edges)

    def connected_component(self, node_id: str) -> set[str]:
        return self._traversal.connected_component(node_id)

    def connections(self, node_id: str) -> list[str]:
        """``[node_id, *incident edge ids]``."""
        return self._traversal.connections(node_id)

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_stats(self) -> GraphStats:
        return self._store.get_stats()
