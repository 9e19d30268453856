"""Tests for GraphSettings: unified settings with TOML source."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from graphnet.config.models import GraphConfig
from graphnet.config.settings import GraphSettings


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = GraphSettings.from_cli(cwd=tmp_path)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.verbose is False
        assert settings.graph.filter_depth == 1
        assert settings.events.enabled is True

    def test_frozen(self, tmp_path: Path) -> None:
        settings = GraphSettings.from_cli(cwd=tmp_path)
        with pytest.raises(Exception):
            settings.verbose = True  # type: ignore[misc]


class TestTomlSource:
    def test_discovered_by_walk_up(self, tmp_path: Path) -> None:
        toml = tmp_path / "graphnet.toml"
        toml.write_text("[graph]\nfilter_depth = 2\n")
        nested = tmp_path / "data"
        nested.mkdir()
        settings = GraphSettings.from_cli(cwd=nested)
        assert settings.graph.filter_depth == 2
        assert settings.graph.neighbor_depth == 1
        assert settings.config_path == toml.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        toml = tmp_path / "other.toml"
        toml.write_text('[merge]\nedge_conflict_resolution = "preserve"\n')
        settings = GraphSettings.from_cli(config_path=str(toml))
        assert settings.merge.edge_conflict_resolution == "preserve"

    def test_missing_explicit_path_uses_defaults(self, tmp_path: Path) -> None:
        settings = GraphSettings.from_cli(config_path=str(tmp_path / "missing.toml"))
        assert settings.config_path is None
        assert settings.graph.filter_depth == 1

    def test_invalid_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "graphnet.toml"
        toml.write_text("[graph\nfilter_depth = ")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            GraphSettings.from_cli(cwd=tmp_path)


class TestPriority:
    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "graphnet.toml").write_text("[graph]\nfilter_depth = 2\n")
        monkeypatch.setenv("GRAPHNET_GRAPH__FILTER_DEPTH", "5")
        settings = GraphSettings.from_cli(cwd=tmp_path)
        assert settings.graph.filter_depth == 5

    def test_cli_flags_beat_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GRAPHNET_VERBOSE", "false")
        settings = GraphSettings.from_cli(cwd=tmp_path, verbose=True)
        assert settings.verbose is True


class TestToConfig:
    def test_sections_carried_over(self, tmp_path: Path) -> None:
        (tmp_path / "graphnet.toml").write_text("[events]\nenabled = false\n")
        config = GraphSettings.from_cli(cwd=tmp_path).to_config()
        assert isinstance(config, GraphConfig)
        assert config.events.enabled is False
