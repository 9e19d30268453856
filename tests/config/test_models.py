"""Tests for the configuration section models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from graphnet.config.models import EventsSection, GraphConfig, GraphSection, MergeSection
from graphnet.domain.types import ConflictResolution


class TestDefaults:
    def test_graph_section(self) -> None:
        section = GraphSection()
        assert section.filter_depth == 1
        assert section.neighbor_depth == 1

    def test_merge_section(self) -> None:
        section = MergeSection()
        assert section.node_conflict_resolution is ConflictResolution.UPDATE
        assert section.edge_conflict_resolution is ConflictResolution.UPDATE

    def test_events_section(self) -> None:
        section = EventsSection()
        assert section.enabled is True
        assert section.load_entrypoints is False

    def test_root_composes_sections(self) -> None:
        config = GraphConfig()
        assert config.graph == GraphSection()
        assert config.merge == MergeSection()
        assert config.events == EventsSection()


class TestValidation:
    def test_negative_depth_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GraphSection(filter_depth=-1)

    def test_unknown_policy_rejected(self) -> None:
        with pytest.raises(ValidationError):
            MergeSection(node_conflict_resolution="overwrite")  # type: ignore[arg-type]

    def test_policy_from_string(self) -> None:
        section = MergeSection.model_validate({"edge_conflict_resolution": "preserve"})
        assert section.edge_conflict_resolution is ConflictResolution.PRESERVE

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            GraphSection().filter_depth = 3  # type: ignore[misc]

    def test_sparse_override(self) -> None:
        config = GraphConfig.model_validate({"graph": {"filter_depth": 4}})
        assert config.graph.filter_depth == 4
        assert config.graph.neighbor_depth == 1
