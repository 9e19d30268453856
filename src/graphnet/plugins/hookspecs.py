"""Pluggy hook specifications for graph notification events.

One hook per event type, each receiving the frozen :class:`GraphEvent`.
Hooks are called synchronously, in mutation order, on the same tick as
the mutation that produced them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

from graphnet.domain.types import EventType

if TYPE_CHECKING:
    from graphnet.domain.models import GraphEvent

PROJECT_NAME = "graphnet"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)

# Event type -> hook name on the relay.
HOOK_NAMES: dict[EventType, str] = {
    EventType.NODE_ADDED: "node_added",
    EventType.NODE_REMOVED: "node_removed",
    EventType.NODE_UPDATED: "node_updated",
    EventType.LINK_ADDED: "link_added",
    EventType.LINK_REMOVED: "link_removed",
    EventType.LINK_UPDATED: "link_updated",
    EventType.NODES_BULK_UPDATED: "nodes_bulk_updated",
    EventType.EDGES_BULK_UPDATED: "edges_bulk_updated",
    EventType.DATA_LOADED: "data_loaded",
    EventType.DATA_MERGED: "data_merged",
    EventType.DATA_CLEARED: "data_cleared",
    EventType.TRANSACTION_COMMITTED: "transaction_committed",
    EventType.TRANSACTION_ROLLED_BACK: "transaction_rolled_back",
}


class GraphHookSpec:
    """Hook specifications for the graphnet plugin system."""

    @hookspec
    def node_added(self, event: GraphEvent) -> None:
        """Called after a node is added."""

    @hookspec
    def node_removed(self, event: GraphEvent) -> None:
        """Called after a node (and its cascaded edges) is removed."""

    @hookspec
    def node_updated(self, event: GraphEvent) -> None:
        """Called after a node's fields change."""

    @hookspec
    def link_added(self, event: GraphEvent) -> None:
        """Called after an edge is added."""

    @hookspec
    def link_removed(self, event: GraphEvent) -> None:
        """Called after an edge is removed, directly or by cascade."""

    @hookspec
    def link_updated(self, event: GraphEvent) -> None:
        """Called after an edge's fields change."""

    @hookspec
    def nodes_bulk_updated(self, event: GraphEvent) -> None:
        """Called once after a bulk node update."""

    @hookspec
    def edges_bulk_updated(self, event: GraphEvent) -> None:
        """Called once after a bulk edge update."""

    @hookspec
    def data_loaded(self, event: GraphEvent) -> None:
        """Called after the whole graph is replaced."""

    @hookspec
    def data_merged(self, event: GraphEvent) -> None:
        """Called after a merge completes."""

    @hookspec
    def data_cleared(self, event: GraphEvent) -> None:
        """Called after the graph is emptied."""

    @hookspec
    def transaction_committed(self, event: GraphEvent) -> None:
        """Called after a transaction commits."""

    @hookspec
    def transaction_rolled_back(self, event: GraphEvent) -> None:
        """Called after a transaction rolls back."""
