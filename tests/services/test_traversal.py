"""Tests for TraversalEngine: depth filter, shortest path, neighbors."""

from __future__ import annotations

import logging

import pytest

from graphnet.domain.errors import NodeNotFoundError
from graphnet.infrastructure.graph.engine import AdjacencyIndex
from graphnet.services.traversal import TraversalEngine


def _engine(node_ids: list[str], pairs: list[tuple[str, str]]) -> TraversalEngine:
    index = AdjacencyIndex()
    index.update_graph_structure(
        node_ids, [{"id": f"{s}-{t}", "source": s, "target": t} for s, t in pairs]
    )
    return TraversalEngine(index)


@pytest.fixture
def square() -> TraversalEngine:
    """Edges inserted A-B, B-C, C-D, A-D."""
    return _engine(["A", "B", "C", "D"], [("A", "B"), ("B", "C"), ("C", "D"), ("A", "D")])


@pytest.fixture
def chain() -> TraversalEngine:
    """a-b-c-d-e plus isolated z."""
    return _engine(
        ["a", "b", "c", "d", "e", "z"], [("a", "b"), ("b", "c"), ("c", "d"), ("d", "e")]
    )


class TestFilterByNode:
    def test_depth_zero_is_seed_only(self, chain: TraversalEngine) -> None:
        assert chain.filter_by_node("c", 0) == {"c"}

    def test_depth_one(self, chain: TraversalEngine) -> None:
        assert chain.filter_by_node("c", 1) == {"b", "c", "d"}

    def test_depth_two(self, chain: TraversalEngine) -> None:
        assert chain.filter_by_node("a", 2) == {"a", "b", "c"}

    def test_follows_edges_backwards(self) -> None:
        engine = _engine(["a", "b", "c"], [("b", "a"), ("c", "b")])
        assert engine.filter_by_node("a", 2) == {"a", "b", "c"}

    def test_isolated_node(self, chain: TraversalEngine) -> None:
        assert chain.filter_by_node("z", 5) == {"z"}

    def test_unknown_node(self, chain: TraversalEngine) -> None:
        with pytest.raises(NodeNotFoundError):
            chain.filter_by_node("nope", 1)

    def test_negative_depth(self, chain: TraversalEngine) -> None:
        with pytest.raises(ValueError, match="depth"):
            chain.filter_by_node("a", -1)

    def test_monotonic_in_depth(self, chain: TraversalEngine) -> None:
        results = [chain.filter_by_node("a", d) for d in range(6)]
        for smaller, larger in zip(results, results[1:]):
            assert smaller <= larger

    def test_connected_component(self, chain: TraversalEngine) -> None:
        assert chain.connected_component("c") == {"a", "b", "c", "d", "e"}
        assert chain.connected_component("z") == {"z"}


class TestShortestPath:
    def test_first_discovered_route(self, square: TraversalEngine) -> None:
        assert square.shortest_path("A", "C") == ["A", "B", "C"]

    def test_adjacent(self, square: TraversalEngine) -> None:
        assert square.shortest_path("A", "D") == ["A", "D"]

    def test_reverse_direction(self, square: TraversalEngine) -> None:
        assert square.shortest_path("C", "A") == ["C", "B", "A"]

    def test_same_node(self, square: TraversalEngine) -> None:
        assert square.shortest_path("A", "A") is None

    def test_unknown_endpoint(self, square: TraversalEngine) -> None:
        assert square.shortest_path("A", "nope") is None
        assert square.shortest_path("nope", "A") is None

    def test_disconnected(self, chain: TraversalEngine) -> None:
        assert chain.shortest_path("a", "z") is None

    def test_path_is_minimal_and_connected(self, chain: TraversalEngine) -> None:
        path = chain.shortest_path("a", "e")
        assert path == ["a", "b", "c", "d", "e"]
        assert chain.path_edges(path) == ["a-b", "b-c", "c-d", "d-e"]

    def test_path_edges_reversed_hops(self, square: TraversalEngine) -> None:
        assert square.path_edges(["C", "B", "A"]) == ["B-C", "A-B"]


class TestNeighbors:
    def test_seed_first_at_depth_zero(self, chain: TraversalEngine) -> None:
        result = chain.neighbors("c", 2)
        assert result.node_ids[0] == "c"
        assert result.depths["c"] == 0

    def test_depths(self, chain: TraversalEngine) -> None:
        result = chain.neighbors("a", 3)
        assert result.node_ids == ["a", "b", "c", "d"]
        assert result.depths == {"a": 0, "b": 1, "c": 2, "d": 3}

    def test_default_depth_is_one(self, chain: TraversalEngine) -> None:
        assert chain.neighbors("c").node_ids == ["c", "b", "d"]

    def test_depth_ratio(self, chain: TraversalEngine) -> None:
        result = chain.neighbors("a", 2)
        assert result.depth_ratio("a") == 0.0
        assert result.depth_ratio("b") == 0.5
        assert result.depth_ratio("c") == 1.0

    def test_edges_only_when_requested(self, chain: TraversalEngine) -> None:
        assert chain.neighbors("b", 1).edges == {}
        result = chain.neighbors("b", 1, include_edges=True)
        assert result.edges == {"a": "a-b", "c": "b-c"}
        assert result.edge_ids == ["a-b", "b-c"]

    def test_unknown_seed_reports_only_seed(self, chain: TraversalEngine) -> None:
        assert chain.neighbors("nope", 2).node_ids == ["nope"]

    def test_negative_depth(self, chain: TraversalEngine) -> None:
        with pytest.raises(ValueError):
            chain.neighbors("a", -2)


class TestConnections:
    def test_node_then_incident_edges(self, square: TraversalEngine) -> None:
        assert square.connections("A") == ["A", "A-B", "A-D"]

    def test_isolated(self, chain: TraversalEngine) -> None:
        assert chain.connections("z") == ["z"]


class TestStaleIndex:
    def test_warns_on_stale_index(
        self, chain: TraversalEngine, caplog: pytest.LogCaptureFixture
    ) -> None:
        chain._index.mark_stale()
        with caplog.at_level(logging.WARNING, logger="graphnet.services.traversal"):
            chain.shortest_path("a", "c")
        assert "stale adjacency index" in caplog.text

    def test_no_warning_when_fresh(
        self, chain: TraversalEngine, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="graphnet.services.traversal"):
            chain.filter_by_node("a", 1)
        assert caplog.text == ""
