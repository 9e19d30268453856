"""Pydantic models for graph data, operation results and events.

Node and edge records themselves are plain dicts owned by the store;
the models here describe the envelopes that cross the API boundary.
"""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel, Field

from graphnet.domain.types import EventType

# ---------------------------------------------------------------------------
# Graph data envelope
# ---------------------------------------------------------------------------


class GraphData(BaseModel):
    """``{"nodes": [...], "links": [...]}`` as accepted by load and merge."""

    model_config = {"frozen": True}

    nodes: list[dict[str, Any]] = Field(default_factory=list)
    links: list[dict[str, Any]] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Operation results
# ---------------------------------------------------------------------------


class MergeResult(BaseModel):
    """Per-category counts from ``merge_data`` plus lenient-policy failures."""

    nodes_added: int = 0
    nodes_updated: int = 0
    nodes_skipped: int = 0
    edges_added: int = 0
    edges_updated: int = 0
    edges_skipped: int = 0
    errors: list[str] = Field(default_factory=list)


class TransactionSummary(BaseModel):
    """Returned by commit and rollback."""

    model_config = {"frozen": True}

    id: str
    operation_count: int
    duration_ms: float


class TransactionStatus(BaseModel):
    """Snapshot of the active transaction."""

    model_config = {"frozen": True}

    id: str
    start_time: float
    operation_count: int
    duration_ms: float


class NeighborResult(BaseModel):
    """Depth-capped neighbor expansion.

    Attributes:
        node_id: The seed node.
        depth: Maximum hops requested.
        node_ids: Discovered ids, closer first; the seed is always first.
        depths: Hop count per discovered node (seed is 0).
        edges: Connecting edge id per discovered non-seed node. Only
            populated when edges were requested.
    """

    model_config = {"frozen": True}

    node_id: str
    depth: int
    node_ids: list[str] = Field(default_factory=list)
    depths: dict[str, int] = Field(default_factory=dict)
    edges: dict[str, str] = Field(default_factory=dict)

    def depth_ratio(self, node_id: str) -> float:
        """Fraction of the maximum depth at which *node_id* was found."""
        if self.depth <= 0:
            return 0.0
        return self.depths[node_id] / self.depth

    @property
    def edge_ids(self) -> list[str]:
        return [self.edges[n] for n in self.node_ids if n in self.edges]


class GraphStats(BaseModel):
    model_config = {"frozen": True}

    node_count: int
    edge_count: int
    isolated_nodes: int


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class GraphEvent(BaseModel):
    """A single notification emitted after a mutation.

    Attributes:
        type: Which event this is.
        ids: Affected node/edge (or transaction) ids.
        before: Payload prior to the mutation, where relevant.
        after: Payload after the mutation, where relevant.
        detail: Event-specific extras (counts, cascaded edges, merge results).
        timestamp: ISO 8601 UTC time of emission.
    """

    model_config = {"frozen": True}

    type: EventType
    ids: list[str] = Field(default_factory=list)
    before: Any = None
    after: Any = None
    detail: dict[str, Any] = Field(default_factory=dict)
    timestamp: str


# ---------------------------------------------------------------------------
# Collaborator hooks
# ---------------------------------------------------------------------------


class PositionHook(Protocol):
    """Carries per-node positional state across a full data replace.

    The rendering/physics layer owns positions; the store only tells it
    which ids existed before the swap and which of them recur after it.
    """

    def capture(self, node_ids: list[str]) -> dict[str, Any]:
        """Return positional state keyed by node id for *node_ids*."""
        ...

    def restore(self, positions: dict[str, Any]) -> None:
        """Reapply state for the node ids that survived the replace."""
        ...
