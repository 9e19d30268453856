"""Subcommand modules for graphnet.

Provides register_commands() which uses deferred imports to keep
``graphnet --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups on the root CLI group."""
    from graphnet.commands.graph import graph

    cli.add_command(graph)
