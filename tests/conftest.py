"""Shared pytest fixtures and test helpers for graphnet tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from graphnet.domain.models import GraphEvent
from graphnet.infrastructure.store import GraphStore
from graphnet.network import GraphNetwork


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_graphnet_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's GRAPHNET_* environment out of tests."""
    monkeypatch.delenv("GRAPHNET_CONFIG", raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root and graphnet logger state after each test.

    The CLI configures logging on every invocation; its handlers must not
    outlive the runner that captured them.
    """
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    graphnet = logging.getLogger("graphnet")
    graphnet_level = graphnet.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    graphnet.setLevel(graphnet_level)


# ---------------------------------------------------------------------------
# Graph builders
# ---------------------------------------------------------------------------


def node(node_id: str, **extra: Any) -> dict[str, Any]:
    """Minimal valid node payload."""
    return {"id": node_id, "name": node_id.upper(), **extra}


def edge(source: str, target: str, **extra: Any) -> dict[str, Any]:
    """Minimal valid edge payload (id defaults to ``source-target``)."""
    return {"source": source, "target": target, **extra}


def square_graph() -> dict[str, Any]:
    """A-B, B-C, C-D, A-D: two equal-length routes from A to C."""
    return {
        "nodes": [node("A"), node("B"), node("C"), node("D")],
        "links": [edge("A", "B"), edge("B", "C"), edge("C", "D"), edge("A", "D")],
    }


def chain_graph(*ids: str) -> dict[str, Any]:
    """Nodes linked in sequence: ids[0]-ids[1]-...-ids[-1]."""
    return {
        "nodes": [node(i) for i in ids],
        "links": [edge(a, b) for a, b in zip(ids, ids[1:])],
    }


class EventRecorder:
    """Callback that records every event it receives."""

    def __init__(self) -> None:
        self.events: list[GraphEvent] = []

    def __call__(self, event: GraphEvent) -> None:
        self.events.append(event)

    @property
    def types(self) -> list[str]:
        return [str(e.type) for e in self.events]


def record_all(network: GraphNetwork) -> EventRecorder:
    """Subscribe one recorder to every event type on *network*."""
    from graphnet.domain.types import EventType

    recorder = EventRecorder()
    for event_type in EventType:
        network.subscribe(event_type, recorder)
    return recorder


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> GraphStore:
    return GraphStore()


@pytest.fixture
def network() -> GraphNetwork:
    """Empty network with a built index."""
    return GraphNetwork()


@pytest.fixture
def square() -> GraphNetwork:
    """Network loaded with :func:`square_graph`, index built."""
    return GraphNetwork(square_graph())


@pytest.fixture
def graph_file(tmp_path: Path) -> Path:
    """:func:`square_graph` plus an isolated node, written as JSON."""
    data = square_graph()
    data["nodes"].append(node("E"))
    path = tmp_path / "network.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
