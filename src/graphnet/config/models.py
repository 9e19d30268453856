"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, graphnet.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from graphnet.domain.types import ConflictResolution


class GraphSection(BaseModel):
    """[graph] section."""

    model_config = {"frozen": True}

    filter_depth: int = Field(default=1, ge=0)
    neighbor_depth: int = Field(default=1, ge=0)


class MergeSection(BaseModel):
    """[merge] section: default conflict policies for merge_data."""

    model_config = {"frozen": True}

    node_conflict_resolution: ConflictResolution = ConflictResolution.UPDATE
    edge_conflict_resolution: ConflictResolution = ConflictResolution.UPDATE


class EventsSection(BaseModel):
    """[events] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    load_entrypoints: bool = False


class GraphConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    graph: GraphSection = Field(default_factory=GraphSection)
    merge: MergeSection = Field(default_factory=MergeSection)
    events: EventsSection = Field(default_factory=EventsSection)
