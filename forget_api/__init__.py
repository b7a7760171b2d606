"""Call a server's controller endpoints without restating their routes."""

from __future__ import annotations

from .errors import (
    ConfigNotFound,
    ForgetApiError,
    NoControllerFound,
    UnresolvableModule,
    UnsupportedRoute,
)
from .expose import define_expose
from .importer import ApiFinder, install, uninstall
from .request import (
    Hooks,
    create_apis,
    on_before_request,
    on_error_captured,
    on_responded,
)
from .routing import generate_route

__all__ = [
    "ApiFinder",
    "ConfigNotFound",
    "ForgetApiError",
    "Hooks",
    "NoControllerFound",
    "UnresolvableModule",
    "UnsupportedRoute",
    "create_apis",
    "define_expose",
    "generate_route",
    "install",
    "on_before_request",
    "on_error_captured",
    "on_responded",
    "uninstall",
]
