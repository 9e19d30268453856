"""Tests for AdjacencyIndex: wholesale rebuild and the stale contract."""

from __future__ import annotations

import networkx as nx

from graphnet.infrastructure.graph.engine import AdjacencyIndex


def _edges(*pairs: tuple[str, str]) -> list[dict[str, str]]:
    return [{"id": f"{s}-{t}", "source": s, "target": t} for s, t in pairs]


def _built(node_ids: list[str], edges: list[dict[str, str]]) -> AdjacencyIndex:
    index = AdjacencyIndex()
    index.update_graph_structure(node_ids, edges)
    return index


class TestLifecycle:
    def test_unbuilt_index_is_stale(self) -> None:
        index = AdjacencyIndex()
        assert not index.is_built
        assert index.stale

    def test_build_clears_stale(self) -> None:
        index = _built(["a"], [])
        assert index.is_built
        assert not index.stale

    def test_mark_stale_then_rebuild(self) -> None:
        index = _built(["a"], [])
        index.mark_stale()
        assert index.stale
        index.update_graph_structure(["a", "b"], [])
        assert not index.stale

    def test_mark_stale_does_not_rebuild(self) -> None:
        index = _built(["a", "b"], _edges(("a", "b")))
        index.mark_stale()
        assert index.neighbors("a") == ["b"]


class TestMaps:
    def test_undirected_adjacency(self) -> None:
        index = _built(["a", "b", "c"], _edges(("a", "b"), ("c", "b")))
        assert index.adjacency == {"a": {"b"}, "b": {"a", "c"}, "c": {"b"}}

    def test_node_to_edges_both_directions(self) -> None:
        index = _built(["a", "b", "c"], _edges(("a", "b"), ("c", "b")))
        assert index.node_to_edges == {"a": ["a-b"], "b": ["a-b", "c-b"], "c": ["c-b"]}

    def test_edge_to_nodes(self) -> None:
        index = _built(["a", "b"], _edges(("a", "b")))
        assert index.edge_to_nodes == {"a-b": ("a", "b")}
        assert index.endpoints("a-b") == ("a", "b")
        assert index.endpoints("nope") is None

    def test_isolated_nodes_present(self) -> None:
        index = _built(["a", "b", "lonely"], _edges(("a", "b")))
        assert "lonely" in index
        assert index.neighbors("lonely") == []
        assert index.incident_edges("lonely") == []

    def test_unknown_endpoint_contributes_no_adjacency(self) -> None:
        index = _built(["a"], _edges(("a", "ghost")))
        assert index.endpoints("a-ghost") == ("a", "ghost")
        assert index.neighbors("a") == []
        assert "ghost" not in index

    def test_parallel_edges_kept_distinct(self) -> None:
        edges = [
            {"id": "e1", "source": "a", "target": "b"},
            {"id": "e2", "source": "b", "target": "a"},
        ]
        index = _built(["a", "b"], edges)
        assert isinstance(index.graph, nx.MultiGraph)
        assert index.graph.number_of_edges() == 2
        assert index.incident_edges("a") == ["e1", "e2"]
        assert index.neighbors("a") == ["b"]

    def test_neighbors_in_insertion_order(self) -> None:
        index = _built(["a", "b", "c", "d"], _edges(("a", "d"), ("a", "b"), ("c", "a")))
        assert index.neighbors("a") == ["d", "b", "c"]

    def test_edge_between_either_direction(self) -> None:
        index = _built(["a", "b", "c"], _edges(("a", "b")))
        assert index.edge_between("a", "b") == "a-b"
        assert index.edge_between("b", "a") == "a-b"
        assert index.edge_between("a", "c") is None

    def test_rebuild_is_deterministic(self) -> None:
        nodes = ["a", "b", "c"]
        edges = _edges(("a", "b"), ("b", "c"))
        first = _built(nodes, edges)
        second = _built(nodes, edges)
        assert first.adjacency == second.adjacency
        assert first.node_to_edges == second.node_to_edges
        assert first.edge_to_nodes == second.edge_to_nodes

    def test_returned_maps_are_copies(self) -> None:
        index = _built(["a", "b"], _edges(("a", "b")))
        index.node_to_edges["a"].append("junk")
        assert index.incident_edges("a") == ["a-b"]
