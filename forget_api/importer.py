"""Import hook serving generated client modules.

With the finder installed, ``import apis.user.user_ctrl`` (``apis`` being the
configured alias) reads ``<routeSrcRoot>/user/user_ctrl.py``, analyzes the
controller it exposes and executes the generated client in its place::

    from forget_api import install

    install()
    from apis.user.user_ctrl import get_one

Resolution works in two steps, like a bundler plugin: ``resolve_id`` maps an
import name to a marked file id (or declines), and ``transform`` turns the
raw code behind a marked id into client source.
"""

from __future__ import annotations

import logging
import sys
from importlib.abc import Loader, MetaPathFinder
from importlib.machinery import ModuleSpec
from pathlib import Path
from types import ModuleType
from typing import Any

from .codegen import transform_file
from .errors import UnresolvableModule
from .loader import RouteConfig, load_config

logger = logging.getLogger(__name__)

# Marks ids produced by resolve_id
MARKER = "?_api"

SOURCE_SUFFIX = ".py"


class ApiLoader(Loader):
    """Execute the generated client for one controller file."""

    def __init__(self, finder: ApiFinder, resolved_id: str) -> None:
        self.finder = finder
        self.resolved_id = resolved_id

    def create_module(self, spec: ModuleSpec) -> ModuleType | None:
        return None

    def exec_module(self, module: ModuleType) -> None:
        """Run the client text rendered by ``codegen.generate``.

        The controller file itself is only parsed, never executed.
        """
        file_path = self.resolved_id[: -len(MARKER)]
        raw = Path(file_path).read_text(encoding="utf-8")
        code, _ = self.finder.transform(raw, self.resolved_id)
        exec(compile(code, self.resolved_id, "exec"), module.__dict__)


class ApiFinder(MetaPathFinder):
    """Resolve ``<alias>.*`` imports to generated controller clients."""

    def __init__(self, config: RouteConfig | None = None, alias: str | None = None) -> None:
        self.config = config or load_config()
        self.alias = alias or self.config.alias
        self.search_root = self.config.route_root("src")

    def _owns(self, name: str) -> bool:
        return name == self.alias or name.startswith(self.alias + ".")

    def _locate(self, source: str) -> Path:
        parts = source.split(".")[1:]
        return self.search_root.joinpath(*parts)

    def _candidates(self, source: str) -> list[Path]:
        """Files an import name may stand for, deepest directory first.

        Trailing name parts may also form a dotted file name, so
        ``alias.user.user.controller`` can be ``user/user.controller.py``.
        """
        parts = source.split(".")[1:]
        return [
            self.search_root.joinpath(*parts[:index], ".".join(parts[index:]) + SOURCE_SUFFIX)
            for index in range(len(parts) - 1, -1, -1)
        ]

    def _find_file(self, source: str) -> Path | None:
        for candidate in self._candidates(source):
            if candidate.is_file():
                return candidate
        return None

    def _is_dotted_prefix(self, source: str) -> bool:
        """Check if ``source`` is the leading part of a dotted file name."""
        parts = source.split(".")[1:]
        for index in range(len(parts)):
            directory = self.search_root.joinpath(*parts[:index])
            pattern = ".".join(parts[index:]) + ".*" + SOURCE_SUFFIX
            if any(path.is_file() for path in directory.glob(pattern)):
                return True
        return False

    def resolve_id(self, source: str, importer: str | None = None) -> str | None:
        """Return the marked id of a controller file, or ``None`` to decline."""
        if not self._owns(source) or source == self.alias:
            return None
        file_path = self._find_file(source)
        if file_path is not None:
            return str(file_path) + MARKER
        raise UnresolvableModule(source, self.search_root)

    def transform(self, code: str, id: str) -> tuple[str, dict[str, Any]] | None:
        """Return generated source and an empty source map for marked ids."""
        if not id.endswith(MARKER):
            return None
        file_path = id[: -len(MARKER)]
        logger.debug("Generating client for %s", file_path)
        generated = transform_file(file_path, code, self.config)
        return generated, {"mappings": ""}

    def find_spec(self, fullname: str, path: Any = None, target: Any = None) -> ModuleSpec | None:
        if not self._owns(fullname):
            return None
        directory = self._locate(fullname)
        is_file = fullname != self.alias and self._find_file(fullname) is not None
        if not is_file and (
            fullname == self.alias or directory.is_dir() or self._is_dotted_prefix(fullname)
        ):
            spec = ModuleSpec(fullname, None, is_package=True)
            spec.submodule_search_locations = [str(directory)]
            return spec
        resolved_id = self.resolve_id(fullname)
        return ModuleSpec(fullname, ApiLoader(self, resolved_id), origin=resolved_id)


def install(config: RouteConfig | None = None, alias: str | None = None) -> ApiFinder:
    """Put a new ``ApiFinder`` in front of ``sys.meta_path``."""
    finder = ApiFinder(config, alias)
    sys.meta_path.insert(0, finder)
    return finder


def uninstall(finder: ApiFinder) -> None:
    """Remove a finder and forget the modules it created."""
    if finder in sys.meta_path:
        sys.meta_path.remove(finder)
    for name in [name for name in sys.modules if finder._owns(name)]:
        del sys.modules[name]
