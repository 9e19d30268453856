"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides graph loading and centralized result
emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import click

from graphnet.config.logging import configure_logging
from graphnet.domain.errors import GraphError
from graphnet.output.formatters import format_result
from graphnet.services.result import ServiceResult

if TYPE_CHECKING:
    from graphnet.config.settings import GraphSettings
    from graphnet.services.graph import GraphService


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: GraphSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def load(self, path: str | Path, *, op: str) -> GraphService:
        """Load the graph file at *path*, or emit a failure for *op* and exit."""
        from graphnet.services.graph import GraphService

        try:
            return GraphService.load(Path(path), config=self.settings.to_config())
        except GraphError as exc:
            self.fail(ServiceResult.failure(op, exc))

    def fail(self, result: ServiceResult) -> NoReturn:
        self.emit(result)
        raise SystemExit(1)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_result(
            result,
            json_output=self.settings.json_output,
            verbose=self.settings.verbose,
        )
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
