"""Statically read a controller module's route decorators.

Handles:
- ``define_expose(SomeController)`` as the only way to designate the controller
- ``@Controller("prefix")``, ``@Controller({"path": ...})`` / ``@Controller(path=...)``
  and ``@Controller(__file__)`` class decorators
- ``@Get``, ``@Post``, ... method decorators with an optional path literal
- Paths containing regex-like characters, which cannot be requested as-is

Nothing from the analyzed module is imported or executed.
"""

from __future__ import annotations

import ast
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from .errors import NoControllerFound
from .loader import RouteConfig
from .routing import generate_route

logger = logging.getLogger(__name__)

EXPOSE_MARKER = "define_expose"
CONTROLLER_DECORATOR = "Controller"
FILE_SENTINEL = "__file__"

# Verb used for paths that are not plain templates
WILDCARD = "PATH_HAS_WILDCARD"

VERBS: tuple[str, ...] = ("DELETE", "GET", "HEAD", "OPTIONS", "PATCH", "POST", "PUT")

# Accepted decorator spellings -> HTTP verb
_VERB_DECORATORS: dict[str, str] = {
    **{verb.capitalize(): verb for verb in VERBS},
    **{verb.lower(): verb for verb in VERBS},
}

_WILDCARD_RE = re.compile(r"[?+*()]")


@dataclass(frozen=True)
class Controller:
    """A controller reduced to its route prefix and endpoint table."""

    name: str
    prefix: str
    endpoints: dict[str, tuple[str, str]] = field(default_factory=dict)


def _call_name(node: ast.AST) -> str | None:
    """Return the callee name of ``name(...)`` or ``module.name(...)``."""
    if not isinstance(node, ast.Call):
        return None
    func = node.func
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return None


def _string_literal(node: ast.AST | None) -> str | None:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return None


def _first_arg(call: ast.Call) -> ast.AST | None:
    return call.args[0] if call.args else None


def _exposed_name(node: ast.stmt) -> str | None:
    """Return the class name passed to ``define_expose`` in a statement."""
    if isinstance(node, (ast.Assign, ast.AnnAssign, ast.Expr)):
        value = node.value
    else:
        return None
    if value is None or _call_name(value) != EXPOSE_MARKER:
        return None
    arg = _first_arg(value)
    if isinstance(arg, ast.Name):
        return arg.id
    return ""


def find_controller_node(tree: ast.Module) -> ast.ClassDef | None:
    """Find the class handed to ``define_expose``.

    Scanning stops at the first ``define_expose`` call; only classes
    defined before it are candidates.
    """
    exposed = ""
    classes: list[ast.ClassDef] = []
    for node in tree.body:
        name = _exposed_name(node)
        if name is not None:
            exposed = name
            break
        if isinstance(node, ast.ClassDef):
            classes.append(node)
    for node in classes:
        if exposed and node.name == exposed:
            return node
    return None


def _has_path_option(arg: ast.AST | None, call: ast.Call) -> bool:
    if isinstance(arg, ast.Dict):
        return any(_string_literal(key) == "path" for key in arg.keys)
    return any(keyword.arg == "path" for keyword in call.keywords)


def get_prefix(
    node: ast.ClassDef,
    file_path: str | Path,
    config: RouteConfig | None = None,
) -> str:
    """Resolve the route prefix from the first ``Controller`` decorator."""
    for decorator in node.decorator_list:
        if _call_name(decorator) != CONTROLLER_DECORATOR:
            continue
        arg = _first_arg(decorator)
        text = _string_literal(arg)
        if text is not None:
            return text
        if _has_path_option(arg, decorator):
            # The option's key, not its value, ends up as the prefix.
            return "path"
        if isinstance(arg, ast.Name) and arg.id == FILE_SENTINEL:
            return generate_route(file_path, "src", config)
        break
    return ""


def _method_route(node: ast.FunctionDef | ast.AsyncFunctionDef) -> tuple[str, str]:
    """Return ``(verb, path)`` for one method from its first verb decorator."""
    for decorator in node.decorator_list:
        verb = _VERB_DECORATORS.get(_call_name(decorator) or "")
        if verb is None:
            continue
        text = _string_literal(_first_arg(decorator))
        if text is None:
            return verb, ""
        if _WILDCARD_RE.search(text):
            return WILDCARD, ""
        return verb, text if text.startswith("/") else "/" + text
    return "GET", ""


def get_endpoints(node: ast.ClassDef) -> dict[str, tuple[str, str]]:
    """Map each method name to ``(verb, path)`` in declaration order."""
    endpoints: dict[str, tuple[str, str]] = {}
    for member in node.body:
        if not isinstance(member, (ast.FunctionDef, ast.AsyncFunctionDef)):
            continue
        if member.name.startswith("__") and member.name.endswith("__"):
            continue
        endpoints[member.name] = _method_route(member)
    return endpoints


def analyze(
    file_path: str | Path,
    source_text: str,
    config: RouteConfig | None = None,
) -> Controller:
    """Parse a controller module into its prefix and endpoint table."""
    tree = ast.parse(source_text, filename=str(file_path))
    node = find_controller_node(tree)
    if node is None:
        raise NoControllerFound(file_path)
    controller = Controller(
        name=node.name,
        prefix=get_prefix(node, file_path, config),
        endpoints=get_endpoints(node),
    )
    logger.debug(
        "Analyzed %s: controller %s at %r with %d endpoints",
        file_path, controller.name, controller.prefix, len(controller.endpoints),
    )
    return controller
