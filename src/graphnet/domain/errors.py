"""Graph error taxonomy.

Every error carries a stable ``code`` discriminant plus a ``details`` dict
holding the offending payload or ids. Errors propagate to the caller
unmodified; the service layer converts them into :class:`ServiceError`
payloads via :meth:`ServiceError.from_graph_error`.
"""

from __future__ import annotations

from typing import Any


class GraphError(Exception):
    """Base class for all graph-related errors."""

    code: str = "GRAPH_ERROR"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}


# --- Validation (malformed payload) ---


class GraphValidationError(GraphError):
    """A payload failed validation."""

    code = "VALIDATION_ERROR"


class NodeValidationError(GraphValidationError):
    code = "NODE_VALIDATION_ERROR"

    def __init__(self, message: str, node_data: Any = None) -> None:
        super().__init__(message, details={"node_data": node_data})


class EdgeValidationError(GraphValidationError):
    code = "EDGE_VALIDATION_ERROR"

    def __init__(self, message: str, edge_data: Any = None) -> None:
        super().__init__(message, details={"edge_data": edge_data})


class DataStructureError(GraphValidationError):
    """Graph data is not shaped like ``{"nodes": [...], "links": [...]}``."""

    code = "DATA_STRUCTURE_ERROR"

    def __init__(self, message: str, data: Any = None) -> None:
        super().__init__(message, details={"data": data})


class BulkValidationError(GraphValidationError):
    """One or more items of a bulk update failed phase-1 validation.

    ``failures`` holds one entry per failing item so callers can report
    every problem at once.
    """

    code = "BULK_VALIDATION_ERROR"

    def __init__(self, kind: str, failures: list[GraphError], ids: list[str]) -> None:
        summary = ", ".join(f"{i}: {f.message}" for i, f in zip(ids, failures, strict=True))
        super().__init__(
            f"Bulk {kind} update validation failed for {len(failures)} {kind}s: {summary}",
            details={
                "failures": [
                    {"id": i, "code": f.code, "message": f.message}
                    for i, f in zip(ids, failures, strict=True)
                ]
            },
        )
        self.failures = failures


# --- Existence (duplicate id on create) ---


class GraphExistsError(GraphError):
    code = "EXISTS_ERROR"


class NodeExistsError(GraphExistsError):
    code = "NODE_EXISTS_ERROR"

    def __init__(self, node_id: str) -> None:
        super().__init__(f'Node with id "{node_id}" already exists', details={"node_id": node_id})
        self.node_id = node_id


class EdgeExistsError(GraphExistsError):
    code = "EDGE_EXISTS_ERROR"

    def __init__(self, edge_id: str) -> None:
        super().__init__(f'Edge with id "{edge_id}" already exists', details={"edge_id": edge_id})
        self.edge_id = edge_id


# --- Not found (operation on absent id) ---


class GraphNotFoundError(GraphError):
    code = "NOT_FOUND_ERROR"


class NodeNotFoundError(GraphNotFoundError):
    code = "NODE_NOT_FOUND_ERROR"

    def __init__(self, node_id: str) -> None:
        super().__init__(f'Node with id "{node_id}" not found', details={"node_id": node_id})
        self.node_id = node_id


class EdgeNotFoundError(GraphNotFoundError):
    code = "EDGE_NOT_FOUND_ERROR"

    def __init__(self, edge_id: str) -> None:
        super().__init__(f'Edge with id "{edge_id}" not found', details={"edge_id": edge_id})
        self.edge_id = edge_id


# --- Referential integrity ---


class InvalidEdgeReferencesError(GraphError):
    """An edge references one or more nodes that do not exist."""

    code = "INVALID_EDGE_REFERENCES_ERROR"

    def __init__(self, source_id: str, target_id: str, missing_node_ids: list[str]) -> None:
        super().__init__(
            f"Edge references non-existent nodes: {', '.join(missing_node_ids)}",
            details={
                "source_id": source_id,
                "target_id": target_id,
                "missing_node_ids": list(missing_node_ids),
            },
        )
        self.missing_node_ids = list(missing_node_ids)


# --- Transactions ---


class TransactionStateError(GraphError):
    """start/commit/rollback called in the wrong coordinator state."""

    code = "TRANSACTION_STATE_ERROR"


# --- Helpers ---

_USER_MESSAGES: dict[str, str] = {
    "NODE_VALIDATION_ERROR": "Invalid data provided. Please check the required fields.",
    "EDGE_VALIDATION_ERROR": "Invalid data provided. Please check the required fields.",
    "NODE_EXISTS_ERROR": "Item already exists in the graph.",
    "EDGE_EXISTS_ERROR": "Item already exists in the graph.",
    "NODE_NOT_FOUND_ERROR": "Item not found in the graph.",
    "EDGE_NOT_FOUND_ERROR": "Item not found in the graph.",
    "INVALID_EDGE_REFERENCES_ERROR": "Cannot create connection to non-existent nodes.",
}


def error_details(error: BaseException) -> dict[str, Any]:
    """Extract a loggable dict from any exception."""
    if isinstance(error, GraphError):
        return {
            "name": type(error).__name__,
            "code": error.code,
            "message": error.message,
            "details": error.details,
        }
    return {"name": type(error).__name__, "message": str(error)}


def user_message(error: BaseException) -> str:
    """Short human-facing message for *error*."""
    if isinstance(error, GraphError):
        return _USER_MESSAGES.get(error.code, error.message)
    return "An unexpected error occurred."
