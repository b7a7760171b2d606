"""Render the client module for an analyzed controller.

The output is Python source text that is executed in memory by the import
hook; nothing is written to disk.
"""

from __future__ import annotations

import keyword
from functools import lru_cache
from pathlib import Path
from typing import Any

import jinja2

from .analyzer import analyze
from .loader import RouteConfig, load_config

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "client.py.j2"

# Module-level names the generated client already uses
_RESERVED_NAMES = {"default", "_create_apis"}


@lru_cache(maxsize=1)
def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["literal"] = repr
    return env


def _bindable(name: str) -> bool:
    """Check if an endpoint can also be exposed as a module attribute."""
    return (
        name.isidentifier()
        and not keyword.iskeyword(name)
        and name not in _RESERVED_NAMES
    )


def build_context(
    prefix: str,
    endpoints: dict[str, tuple[str, str]],
    base_url: str = "",
    controller: str | None = None,
) -> dict[str, Any]:
    """Build the template context for one controller."""
    table = {name: (verb, path) for name, (verb, path) in endpoints.items()}
    return {
        "prefix": base_url + prefix,
        "endpoints": table,
        "names": [name for name in table if _bindable(name)],
        "controller": controller,
    }


def generate(
    prefix: str,
    endpoints: dict[str, tuple[str, str]],
    base_url: str = "",
    controller: str | None = None,
) -> str:
    """Render the client module source."""
    context = build_context(prefix, endpoints, base_url, controller)
    return _environment().get_template(TEMPLATE_NAME).render(**context)


def transform_file(
    file_path: str | Path,
    source_text: str | None = None,
    config: RouteConfig | None = None,
) -> str:
    """Analyze a controller file and return its client module source."""
    config = config or load_config()
    if source_text is None:
        source_text = Path(file_path).read_text(encoding="utf-8")
    controller = analyze(file_path, source_text, config)
    return generate(controller.prefix, controller.endpoints, config.base, controller.name)
