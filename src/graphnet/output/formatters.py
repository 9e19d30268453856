"""Human/JSON output helpers.

The CLI renders a ServiceResult for humans (``OK:``/``ERROR:`` header
plus indented key-value lines) or for machines (``--json``).
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from graphnet.services.result import ServiceResult


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"))
    return str(value)


def _format_data_human(data: dict[str, Any], *, verbose: bool = False) -> str:
    """Format result data as indented key-value pairs.

    List-of-dict values (``items``) get one line per entry when *verbose*.
    """
    lines: list[str] = []
    for key, value in data.items():
        if verbose and isinstance(value, list) and value and isinstance(value[0], dict):
            lines.append(f"  {key}:")
            lines.extend(f"    - {_format_value(item)}" for item in value)
        else:
            lines.append(f"  {key}: {_format_value(value)}")
    return "\n".join(lines)


def format_result(
    result: ServiceResult,
    *,
    json_output: bool = False,
    verbose: bool = False,
) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        json_output: If True, return JSON; otherwise return human-readable text.
        verbose: Expand item lists one per line in human mode.
    """
    if json_output:
        return result.model_dump_json(indent=2)
    if result.ok:
        parts = [f"OK: {result.op}"]
        if result.data:
            parts.append(_format_data_human(result.data, verbose=verbose))
        return "\n".join(parts)
    error_msg = result.error.message if result.error else "Unknown error"
    code = f" [{result.error.code}]" if result.error else ""
    return f"ERROR: {result.op}{code}: {error_msg}"
