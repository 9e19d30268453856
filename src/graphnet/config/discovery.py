"""Locating and reading ``graphnet.toml``.

Lookup order: the ``GRAPHNET_CONFIG`` env var (an explicit file, never
searched past), then ``graphnet.toml`` in the start directory or the
nearest ancestor holding one.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

from graphnet.config.models import GraphConfig

CONFIG_FILENAME = "graphnet.toml"
CONFIG_ENV_VAR = "GRAPHNET_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), or None."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        explicit = Path(env_path).expanduser()
        return explicit if explicit.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*; unreadable or malformed files become a ClickException."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> GraphConfig:
    """Read the ``[graph]``, ``[merge]`` and ``[events]`` sections.

    Without a file, every section takes its defaults. Tables other than
    those three are ignored.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return GraphConfig()

    data = read_toml(path)
    return GraphConfig.model_validate(
        {key: data[key] for key in GraphConfig.model_fields if key in data}
    )
