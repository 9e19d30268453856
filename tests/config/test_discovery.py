"""Tests for graphnet.toml discovery and loading."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from graphnet.config.discovery import CONFIG_ENV_VAR, find_config, load_config, read_toml


class TestFindConfig:
    def test_in_start_dir(self, tmp_path: Path) -> None:
        toml = tmp_path / "graphnet.toml"
        toml.write_text("")
        assert find_config(tmp_path) == toml.resolve()

    def test_walks_up(self, tmp_path: Path) -> None:
        toml = tmp_path / "graphnet.toml"
        toml.write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == toml.resolve()

    def test_not_found(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        other = tmp_path / "elsewhere.toml"
        other.write_text("")
        (tmp_path / "graphnet.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(other))
        assert find_config(tmp_path) == other

    def test_env_pointing_nowhere(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "graphnet.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None


    def test_env_path_expands_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "mine.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, "~/mine.toml")
        assert find_config() == tmp_path / "mine.toml"


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        config = load_config(cwd=tmp_path)
        assert config.graph.filter_depth == 1

    def test_explicit_path(self, tmp_path: Path) -> None:
        toml = tmp_path / "custom.toml"
        toml.write_text('[graph]\nfilter_depth = 3\n[merge]\nnode_conflict_resolution = "error"\n')
        config = load_config(toml)
        assert config.graph.filter_depth == 3
        assert config.merge.node_conflict_resolution == "error"
        assert config.events.enabled is True

    def test_discovered_from_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "graphnet.toml").write_text("[events]\nenabled = false\n")
        nested = tmp_path / "data"
        nested.mkdir()
        assert load_config(cwd=nested).events.enabled is False

    def test_unrelated_tables_ignored(self, tmp_path: Path) -> None:
        toml = tmp_path / "graphnet.toml"
        toml.write_text('[tool.other]\nname = "x"\n[graph]\nneighbor_depth = 2\n')
        assert load_config(toml).graph.neighbor_depth == 2

    def test_malformed_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "graphnet.toml"
        toml.write_text("[graph\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            load_config(toml)


class TestReadToml:
    def test_non_utf8_bytes(self, tmp_path: Path) -> None:
        toml = tmp_path / "graphnet.toml"
        toml.write_bytes(b"\xff\xfe")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            read_toml(toml)
