"""Derive a controller's route from where its file lives.

A controller file is named after its constructor plus a configured suffix.
The route is the file's directory relative to the route root, with the
constructor name appended unless the directory already carries it.

Examples (route root ``/proj/api``, suffix ``_ctrl``):
  /proj/api/user_ctrl.py            -> /user
  /proj/api/user/user_ctrl.py       -> /user
  /proj/api/admin/user_ctrl.py      -> /admin/user
  /proj/api/admin/user/user_ctrl.py -> /admin/user
"""

from __future__ import annotations

import os
from pathlib import Path

from .loader import RouteConfig, load_config


def _ctor_name(stem: str, suffix: str) -> str:
    """Strip the first occurrence of the controller suffix from a file stem."""
    if not suffix:
        return stem
    return stem.replace(suffix, "", 1)


def _target_path(file_path: Path, suffix: str) -> Path:
    """Return the directory a controller file stands for."""
    ctor_name = _ctor_name(file_path.stem, suffix)
    directory = file_path.parent
    if directory.name == ctor_name:
        return directory
    return directory / ctor_name


def generate_route(
    file_path: str | Path,
    variant: str = "dist",
    config: RouteConfig | None = None,
) -> str:
    """Return the route (always starting with ``/``) for a controller file."""
    config = config or load_config()
    route_root = config.route_root(variant)
    target = _target_path(Path(file_path).resolve(), config.suffix)
    relative = os.path.relpath(target, route_root)
    if relative == os.curdir:
        relative = ""
    return "/" + relative.replace("\\", "/")
