"""Shared fixtures for forget-api tests.

Project fixtures lay out a throwaway project tree with a ``full-stack.json``
and make it the working directory, so config discovery behaves exactly as
it does in a real checkout.
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from forget_api import request
from forget_api.loader import clear_config_cache


# ---------------------------------------------------------------------------
# Config / project layout
# ---------------------------------------------------------------------------

PROJECT_CONFIG: dict[str, Any] = {
    "routeDistRoot": "dist/api",
    "routeSrcRoot": "api",
    "alias": "testapis",
    "base": "",
    "suffix": "_ctrl",
}

USER_CONTROLLER = '''
from forget_api import define_expose
from server.nest import Controller, Get, Post, Delete


@Controller(__file__)
class UserController:
    def __init__(self, service):
        self.service = service

    @Get(":id")
    def get_one(self, id):
        return self.service.find(id)

    @Get()
    def get_all(self):
        return self.service.find_all()

    @Post()
    async def create(self, body):
        return await self.service.create(body)

    @Delete("/:id")
    def remove(self, id):
        return self.service.remove(id)

    @Get("files/*")
    def download(self):
        ...


expose = define_expose(UserController)
'''


@pytest.fixture
def user_source() -> str:
    """Source of a typical controller module."""
    return USER_CONTROLLER


@pytest.fixture(autouse=True)
def _fresh_config():
    """Never let a memoized config leak between tests."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a project root with a config and chdir into it."""
    root = tmp_path / "proj"
    (root / "api").mkdir(parents=True)
    (root / "full-stack.json").write_text(json.dumps(PROJECT_CONFIG))
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def write_file(project: Path) -> Callable[[str, str], Path]:
    """Write a file under the project root and return its path."""
    def _write(relative: str, content: str) -> Path:
        path = project / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content))
        return path
    return _write


# ---------------------------------------------------------------------------
# Hooks: restore the process-wide hook set after each test
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _restore_hooks():
    saved = vars(request.global_hooks).copy()
    yield
    vars(request.global_hooks).update(saved)


# ---------------------------------------------------------------------------
# Network: record requests instead of sending them
# ---------------------------------------------------------------------------

class RecordingFetch:
    """Fake network primitive that records each call."""

    def __init__(self, payload: Any = None, status_code: int = 200) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.payload = {"ok": True} if payload is None else payload
        self.status_code = status_code

    async def __call__(self, url: str, init: dict[str, Any]) -> httpx.Response:
        self.calls.append((url, init))
        return httpx.Response(
            self.status_code,
            json=self.payload,
            request=httpx.Request(init["method"], "http://testserver" + url),
        )

    @property
    def last(self) -> tuple[str, dict[str, Any]]:
        return self.calls[-1]


@pytest.fixture
def recorder() -> RecordingFetch:
    return RecordingFetch()


class MockServer:
    """Records requests sent through a real client on a MockTransport."""

    base_url = "http://testserver"

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, req: httpx.Request) -> httpx.Response:
        self.requests.append(req)
        return httpx.Response(200, json={"path": req.url.path, "method": req.method})

    @property
    def options(self) -> dict[str, Any]:
        """Request options pointing the default client at this server."""
        return {"base_url": self.base_url, "transport": self.transport}


@pytest.fixture
def mock_server() -> MockServer:
    return MockServer()
