"""Command group: graph inspection and traversal over a JSON graph file."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from graphnet.commands._context import AppContext

_GRAPH_FILE = click.Path(exists=True, dir_okay=False)


@click.group(
    epilog="""\b
Examples:
  graphnet graph stats network.json
  graphnet graph filter network.json a --depth 2
  graphnet --json graph path network.json a d"""
)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Inspect and traverse a graph stored as {"nodes": [...], "links": [...]}."""


@graph.command()
@click.argument("file", type=_GRAPH_FILE)
@click.pass_obj
def stats(app: AppContext, file: str) -> None:
    """Show node, edge, isolated-node and component counts."""
    app.emit(app.load(file, op="stats").stats())


@graph.command()
@click.argument("file", type=_GRAPH_FILE)
@click.pass_obj
def validate(app: AppContext, file: str) -> None:
    """Check that the file loads under every validation rule."""
    app.emit(app.load(file, op="validate").validate())


@graph.command(name="filter")
@click.argument("file", type=_GRAPH_FILE)
@click.argument("node_id")
@click.option("--depth", default=None, type=int, help="Maximum hops (default: graph.filter_depth).")
@click.pass_obj
def filter_cmd(app: AppContext, file: str, node_id: str, depth: int | None) -> None:
    """List nodes within DEPTH hops of NODE_ID."""
    app.emit(app.load(file, op="filter").filter(node_id, depth=depth))


@graph.command()
@click.argument("file", type=_GRAPH_FILE)
@click.argument("source_id")
@click.argument("target_id")
@click.pass_obj
def path(app: AppContext, file: str, source_id: str, target_id: str) -> None:
    """Find the shortest path between two nodes."""
    app.emit(app.load(file, op="path").path(source_id, target_id))


@graph.command()
@click.argument("file", type=_GRAPH_FILE)
@click.argument("node_id")
@click.option(
    "--depth", default=None, type=int, help="Maximum hops (default: graph.neighbor_depth)."
)
@click.pass_obj
def neighbors(app: AppContext, file: str, node_id: str, depth: int | None) -> None:
    """Expand outward from NODE_ID, reporting each node's depth."""
    app.emit(app.load(file, op="neighbors").neighbors(node_id, depth=depth))


@graph.command()
@click.argument("file", type=_GRAPH_FILE)
@click.argument("node_id")
@click.pass_obj
def connections(app: AppContext, file: str, node_id: str) -> None:
    """List the edges touching NODE_ID."""
    app.emit(app.load(file, op="connections").connections(node_id))
