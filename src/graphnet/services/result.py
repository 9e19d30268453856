"""ServiceResult and ServiceError: the contract between core and outer surfaces.

INVARIANT: GraphService methods return ServiceResult; graph errors become
``ok=False`` results carrying the error's stable code.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from graphnet.domain.errors import GraphError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_graph_error(cls, error: GraphError) -> ServiceError:
        return cls(code=error.code, message=error.message, detail=error.details)


class ServiceResult(BaseModel):
    """Universal return type for service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"shortest_path"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, error: GraphError) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError.from_graph_error(error))
