"""Marker used by server modules to designate their controller.

A controller module ends with::

    expose = define_expose(UserController)

The analyzer looks for this call statically; at runtime it is a no-op.
"""

from __future__ import annotations

from typing import TypeVar

T = TypeVar("T", bound=type)


def define_expose(ctor: T) -> T:
    """Mark ``ctor`` as the module's controller and return it unchanged."""
    return ctor
