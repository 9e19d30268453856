"""Entity validation: pure predicates over node and edge payloads.

Validators raise typed errors on the first violation and never touch
store state. Existence and referential checks live in the store, since
they need it; they are never skippable.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from graphnet.domain.errors import (
    DataStructureError,
    EdgeValidationError,
    GraphValidationError,
    NodeValidationError,
)
from graphnet.domain.models import GraphData
from graphnet.domain.types import LineType

LINE_TYPES: frozenset[str] = frozenset(str(t) for t in LineType)

# Fields an edge update may never change.
EDGE_IDENTITY_FIELDS: tuple[str, ...] = ("id", "source", "target")


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _is_number(value: Any) -> bool:
    # bool is an int subclass; a size of True is never intended.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def default_edge_id(source: str, target: str) -> str:
    """Edge id used when the caller omits one."""
    return f"{source}-{target}"


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


def _check_node_fields(fields: Mapping[str, Any], payload: Any) -> None:
    """Validate optional node fields present in *fields*. A present key may not be None."""
    if "name" in fields and not _is_non_empty_string(fields["name"]):
        raise NodeValidationError("Node name must be a non-empty string", payload)

    if "type" in fields and not isinstance(fields["type"], str):
        raise NodeValidationError("Node type must be a string", payload)

    if "size" in fields:
        size = fields["size"]
        if not _is_number(size) or not math.isfinite(size) or size <= 0:
            raise NodeValidationError("Node size must be a positive finite number", payload)


def validate_node(payload: Any) -> None:
    """Validate a full node payload for creation."""
    if not isinstance(payload, Mapping):
        raise NodeValidationError(
            "Invalid node data. Must have id and name properties.", payload
        )
    if not _is_non_empty_string(payload.get("id")):
        raise NodeValidationError("Node id must be a non-empty string", payload)
    if "name" not in payload:
        raise NodeValidationError("Node name must be a non-empty string", payload)
    _check_node_fields(payload, payload)


def validate_node_updates(node_id: str, updates: Any) -> None:
    """Validate a partial node update targeting *node_id*."""
    if not isinstance(updates, Mapping):
        raise NodeValidationError("Node updates must be a mapping", updates)
    if "id" in updates and updates["id"] != node_id:
        raise NodeValidationError("Node id cannot be changed by an update", updates)
    _check_node_fields(updates, updates)


# ---------------------------------------------------------------------------
# Edges
# ---------------------------------------------------------------------------


def _check_edge_fields(fields: Mapping[str, Any], payload: Any) -> None:
    """Validate optional edge fields present in *fields*. A present key may not be None."""
    if "label" in fields and not isinstance(fields["label"], str):
        raise EdgeValidationError("Edge label must be a string", payload)

    if "weight" in fields:
        weight = fields["weight"]
        if not _is_number(weight) or math.isnan(weight) or weight < 0:
            raise EdgeValidationError("Edge weight must be a non-negative number", payload)

    if "line_type" in fields:
        line_type = fields["line_type"]
        if not isinstance(line_type, str) or line_type not in LINE_TYPES:
            raise EdgeValidationError(
                'Edge line_type must be "solid", "dashed", or "dotted"', payload
            )


def validate_edge(payload: Any) -> None:
    """Validate a full edge payload for creation.

    The id is checked after defaulting, so callers should pass the payload
    produced by :func:`normalize_edge` when the id may be omitted.
    """
    if not isinstance(payload, Mapping):
        raise EdgeValidationError("Invalid edge data. Must have source and target.", payload)
    if not _is_non_empty_string(payload.get("id")):
        raise EdgeValidationError("Edge id must be a non-empty string", payload)
    if not _is_non_empty_string(payload.get("source")):
        raise EdgeValidationError("Edge source must be a non-empty string", payload)
    if not _is_non_empty_string(payload.get("target")):
        raise EdgeValidationError("Edge target must be a non-empty string", payload)
    if payload["source"] == payload["target"]:
        raise EdgeValidationError("Edge cannot connect node to itself", payload)
    _check_edge_fields(payload, payload)


def validate_edge_updates(edge: Mapping[str, Any], updates: Any) -> None:
    """Validate a partial update against the stored *edge*."""
    if not isinstance(updates, Mapping):
        raise EdgeValidationError("Edge updates must be a mapping", updates)
    for key in EDGE_IDENTITY_FIELDS:
        if key in updates and updates[key] != edge[key]:
            raise EdgeValidationError(f"Edge {key} cannot be changed by an update", updates)
    _check_edge_fields(updates, updates)


def normalize_edge(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new edge dict with the default id filled in.

    Weight and line_type defaults are applied by the store after
    validation so an invalid explicit value is never masked.
    """
    edge = dict(payload)
    if edge.get("id") is None and isinstance(edge.get("source"), str):
        edge["id"] = default_edge_id(edge["source"], str(edge.get("target")))
    return edge


# ---------------------------------------------------------------------------
# Predicates and envelopes
# ---------------------------------------------------------------------------


def is_node_data(obj: Any) -> bool:
    """True when *obj* would pass :func:`validate_node`."""
    try:
        validate_node(obj)
    except GraphValidationError:
        return False
    return True


def is_edge_data(obj: Any) -> bool:
    """True when *obj* would pass :func:`validate_edge` once its id is defaulted."""
    if not isinstance(obj, Mapping):
        return False
    try:
        validate_edge(normalize_edge(obj))
    except GraphValidationError:
        return False
    return True


def _items(data: Mapping[str, Any], key: str) -> Any:
    # Only a missing or null key means empty; other falsy values fail the model.
    value = data.get(key)
    return [] if value is None else value


def parse_graph_data(data: Any) -> GraphData:
    """Coerce *data* into :class:`GraphData` or raise :class:`DataStructureError`."""
    if isinstance(data, GraphData):
        return data
    if not isinstance(data, Mapping):
        raise DataStructureError(
            "Invalid graph data format. Must contain nodes and links arrays.", data
        )
    try:
        return GraphData.model_validate(
            {"nodes": _items(data, "nodes"), "links": _items(data, "links")}
        )
    except ValidationError as exc:
        raise DataStructureError(
            f"Invalid graph data format: {exc.error_count()} structural error(s)", data
        ) from exc
