"""structlog setup for the graphnet CLI.

graphnet modules log through stdlib ``logging.getLogger(__name__)``; this
module routes those records through structlog's ProcessorFormatter so the
CLI can emit either console lines or JSON lines on stderr.
"""

from __future__ import annotations

import logging
import sys

import structlog

LOGGER_NAME = "graphnet"

# Third-party loggers held at WARNING regardless of --verbose.
QUIET_LOGGERS: tuple[str, ...] = ("networkx", "pluggy")

_HANDLER_NAME = "graphnet-stderr"


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def _render_chain(log_json: bool) -> list[structlog.types.Processor]:
    if log_json:
        # Listener failures carry exc_info; JSON needs it flattened to a string.
        return [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install one stderr handler on the root logger and set graphnet's level.

    Calling this again replaces the handler installed by the previous call
    and leaves handlers owned by the host application alone.

    Args:
        verbose: DEBUG for ``graphnet.*`` (store, traversal, transactions);
            otherwise WARNING, which still shows listener failures and
            stale-index warnings.
        log_json: Render JSON lines instead of console output.
    """
    pre_chain = _pre_chain()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_render_chain(log_json),
            ],
        )
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
