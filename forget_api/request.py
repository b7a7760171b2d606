"""Runtime side of generated client modules.

``create_apis`` turns an endpoint table into async callables::

    apis = create_apis("/user", {"get_one": ("GET", "/:id")})
    user = await apis["get_one"]({"id": 7})  # GET /user/7

Every call runs the hooks in order: ``before_request(options)``, the HTTP
request, ``responded(response)``. Any error along the way is handed to
``error_captured(error)``, whose return value becomes the call's result.
Hooks are shared process-wide unless a ``Hooks`` instance is passed to
``create_apis``.
"""

from __future__ import annotations

import inspect
import json
import logging
import re
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from .analyzer import WILDCARD
from .errors import UnsupportedRoute

logger = logging.getLogger(__name__)

METHODS_WITHOUT_BODY = ("GET", "HEAD")

_PARAM_SPLIT_RE = re.compile(r"(/:[^/]+)")

# Options consumed by the client itself rather than by the request
CLIENT_OPTIONS = ("base_url", "transport")

Fetch = Callable[[str, dict[str, Any]], Awaitable[Any]]
Endpoint = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class Param:
    """A ``:key`` placeholder in a path template."""

    key: str


def _noop(options: dict[str, Any]) -> None:
    return None


def _parse_json(response: httpx.Response) -> Any:
    return response.json()


def _rethrow(error: BaseException) -> Any:
    raise error


class Hooks:
    """The active set of request hooks."""

    def __init__(
        self,
        before_request: Callable[[dict[str, Any]], Any] = _noop,
        responded: Callable[[Any], Any] = _parse_json,
        error_captured: Callable[[BaseException], Any] = _rethrow,
    ) -> None:
        self.before_request = before_request
        self.responded = responded
        self.error_captured = error_captured


# Process-wide hooks used by every API created without explicit hooks
global_hooks = Hooks()


def on_before_request(callback: Callable[[dict[str, Any]], Any]) -> None:
    """Replace the global ``before_request`` hook."""
    global_hooks.before_request = callback


def on_responded(callback: Callable[[Any], Any]) -> None:
    """Replace the global ``responded`` hook."""
    global_hooks.responded = callback


def on_error_captured(callback: Callable[[BaseException], Any]) -> None:
    """Replace the global ``error_captured`` hook."""
    global_hooks.error_captured = callback


async def _invoke(callback: Callable[..., Any], *args: Any) -> Any:
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


async def httpx_fetch(url: str, init: dict[str, Any]) -> httpx.Response:
    """Send one request with a throwaway ``httpx.AsyncClient``.

    ``init`` carries ``method`` and ``body``. ``base_url`` and ``transport``
    configure the client, so relative URLs need a ``base_url``; every other
    key is passed on to ``AsyncClient.request`` (``headers``, ``timeout``, ...).
    """
    init = dict(init)
    method = init.pop("method")
    body = init.pop("body", None)
    client_options = {key: init.pop(key) for key in CLIENT_OPTIONS if key in init}
    async with httpx.AsyncClient(**client_options) as client:
        return await client.request(method, url, content=body, **init)


def split_url(url: str) -> list[str | Param]:
    """Split a path template into literal and ``Param`` segments."""
    segments: list[str | Param] = []
    for part in _PARAM_SPLIT_RE.split(url):
        if part.startswith("/:"):
            segments.extend(("/", Param(part[2:])))
        elif part:
            segments.append(part)
    return segments


def concat_url_segments(
    segments: list[str | Param],
    data: dict[str, Any] | None = None,
) -> str:
    """Fill in a split template, consuming used keys from ``data``."""
    if data is None:
        data = {}
    url = ""
    for segment in segments:
        if isinstance(segment, Param):
            value = data.pop(segment.key, None)
            url += "" if value is None else _to_text(value)
        else:
            url += segment
    return url


def _to_text(value: Any) -> str:
    """Render a URL value, spelling booleans and None the JSON way."""
    if value is None or isinstance(value, bool):
        return json.dumps(value)
    return str(value)


def _dumps(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"))


def build_request(
    segments: list[str | Param],
    method: str,
    data: Any = None,
) -> tuple[str, Any]:
    """Return the ``(url, body)`` to send for one call."""
    if isinstance(data, Mapping):
        remaining = dict(data)
        url = concat_url_segments(segments, remaining)
        if method.upper() not in METHODS_WITHOUT_BODY:
            return url, _dumps(remaining)
        query = "&".join(f"{key}={_to_text(value)}" for key, value in remaining.items())
        if query:
            url += "?" + query
        return url, None
    url = concat_url_segments(segments)
    if isinstance(data, (list, tuple)):
        return url, _dumps(data)
    return url, data


def create_request(
    method: str,
    url: str,
    hooks: Hooks | None = None,
    fetch: Fetch | None = None,
) -> Endpoint:
    """Bind one endpoint to its verb and absolute path template."""
    segments = split_url(url)

    async def request(data: Any = None, options: dict[str, Any] | None = None) -> Any:
        active = hooks or global_hooks
        send = fetch or httpx_fetch
        try:
            if method == WILDCARD:
                raise UnsupportedRoute(url)
            options = dict(options or {})
            if not options.get("method"):
                options["method"] = method
            resolved, body = build_request(segments, options["method"], data)
            await _invoke(active.before_request, options)
            logger.debug("%s %s", options["method"], resolved)
            response = await send(resolved, {"body": body, **options})
            return await _invoke(active.responded, response)
        except Exception as error:
            return await _invoke(active.error_captured, error)

    return request


def create_apis(
    prefix: str,
    config: dict[str, tuple[str, str] | list[str]],
    *,
    hooks: Hooks | None = None,
    fetch: Fetch | None = None,
) -> dict[str, Endpoint]:
    """Create one async callable per entry of an endpoint table."""
    return {
        name: create_request(method, prefix + path, hooks=hooks, fetch=fetch)
        for name, (method, path) in config.items()
    }
