"""Exceptions raised by forget-api.

Build-time failures (configuration lookup, controller discovery, module
resolution) are raised directly. Runtime failures of generated endpoints
are handed to the ``error_captured`` hook instead.
"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "ForgetApiError",
    "ConfigNotFound",
    "NoControllerFound",
    "UnsupportedRoute",
    "UnresolvableModule",
]


class ForgetApiError(Exception):
    """Base class for all forget-api errors."""


class ConfigNotFound(ForgetApiError, FileNotFoundError):
    """Raised when no ``full-stack.json`` can be found.

    Attributes:
        directory: The directory the lookup started from.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = str(directory)
        super().__init__(f"cannot find a valid config file from {self.directory!r}")


class NoControllerFound(ForgetApiError):
    """Raised when a source file exposes no controller class."""

    def __init__(self, file_path: str | Path) -> None:
        self.file_path = str(file_path)
        super().__init__(f"cannot find a valid controller in {self.file_path}")


class UnsupportedRoute(ForgetApiError):
    """Raised when an endpoint whose path is not statically known is called."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"route {url!r} contains a wildcard and cannot be requested")


class UnresolvableModule(ForgetApiError, ImportError):
    """Raised when an aliased import does not map to a controller file."""

    def __init__(self, specifier: str, search_root: str | Path) -> None:
        self.specifier = specifier
        self.search_root = str(search_root)
        super().__init__(
            f"cannot resolve {specifier!r} under {self.search_root}",
            name=specifier,
        )
