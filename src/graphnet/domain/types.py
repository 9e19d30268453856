"""Enumerations shared across the graph core."""

from __future__ import annotations

from enum import StrEnum


class LineType(StrEnum):
    """Visual style of an edge line."""

    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"


class ConflictResolution(StrEnum):
    """How ``merge_data`` treats an incoming item whose id already exists."""

    UPDATE = "update"
    PRESERVE = "preserve"
    ERROR = "error"


class EventType(StrEnum):
    """Notification events emitted after graph mutations."""

    NODE_ADDED = "nodeAdded"
    NODE_REMOVED = "nodeRemoved"
    NODE_UPDATED = "nodeUpdated"
    LINK_ADDED = "linkAdded"
    LINK_REMOVED = "linkRemoved"
    LINK_UPDATED = "linkUpdated"
    NODES_BULK_UPDATED = "nodesBulkUpdated"
    EDGES_BULK_UPDATED = "edgesBulkUpdated"
    DATA_LOADED = "dataLoaded"
    DATA_MERGED = "dataMerged"
    DATA_CLEARED = "dataCleared"
    TRANSACTION_COMMITTED = "transactionCommitted"
    TRANSACTION_ROLLED_BACK = "transactionRolledBack"


class OperationType(StrEnum):
    """Operation kinds recorded in a transaction's audit log."""

    ADD_NODE = "addNode"
    DELETE_NODE = "deleteNode"
    UPDATE_NODE = "updateNode"
    ADD_EDGE = "addEdge"
    DELETE_EDGE = "deleteEdge"
    UPDATE_EDGE = "updateEdge"
    SET_DATA = "setData"
    MERGE_DATA = "mergeData"
    CLEAR_DATA = "clearData"


DEFAULT_EDGE_WEIGHT = 1
DEFAULT_LINE_TYPE = LineType.SOLID
