"""Locate and load the project's ``full-stack.json``.

The config file is looked up from the current working directory upward.
Its optional ``root`` entry points at the real project root, whose own
``full-stack.json`` holds the settings used for route derivation.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from .errors import ConfigNotFound

CONFIG_FILE_NAME = "full-stack.json"


@dataclass(frozen=True)
class RouteConfig:
    """Settings read from ``full-stack.json``."""

    project_root: Path
    route_dist_root: str = "."
    route_src_root: str = "."
    alias: str = "apis"
    base: str = ""
    suffix: str = ""
    root: str | None = None

    def route_root(self, variant: str) -> Path:
        """Return the absolute route root for the ``dist`` or ``src`` variant."""
        if variant == "dist":
            return (self.project_root / self.route_dist_root).resolve()
        if variant == "src":
            return (self.project_root / self.route_src_root).resolve()
        raise ValueError(f"unknown route variant {variant!r}")


def _read_json(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def find_config_file(start: str | Path | None = None) -> Path:
    """Return the nearest config file at or above ``start``."""
    directory = Path(start or Path.cwd()).resolve()
    for candidate in (directory, *directory.parents):
        config_path = candidate / CONFIG_FILE_NAME
        if config_path.is_file():
            return config_path
    raise ConfigNotFound(directory)


def get_project_root(start: str | Path | None = None) -> Path:
    """Return the project root, honouring the ``root`` redirect."""
    config_path = find_config_file(start)
    root = _read_json(config_path).get("root")
    if root:
        return (config_path.parent / root).resolve()
    return config_path.parent


@lru_cache(maxsize=None)
def _load_config(project_root: Path) -> RouteConfig:
    config_path = project_root / CONFIG_FILE_NAME
    if not config_path.is_file():
        raise ConfigNotFound(project_root)
    data = _read_json(config_path)
    return RouteConfig(
        project_root=project_root,
        route_dist_root=data.get("routeDistRoot", "."),
        route_src_root=data.get("routeSrcRoot", "."),
        alias=data.get("alias", "apis"),
        base=data.get("base", ""),
        suffix=data.get("suffix", ""),
        root=data.get("root"),
    )


def load_config(start: str | Path | None = None) -> RouteConfig:
    """Load the project config, once per project root."""
    return _load_config(get_project_root(start))


def clear_config_cache() -> None:
    """Forget every loaded config."""
    _load_config.cache_clear()
