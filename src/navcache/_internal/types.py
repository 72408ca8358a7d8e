"""Shared type aliases used across navcache modules."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

# Zero-argument change notification
Callback: TypeAlias = Callable[[], None]

# Receives the change descriptor passed to notify()
Listener: TypeAlias = Callable[[Any], None]

# Time source; returns seconds as a float
Clock: TypeAlias = Callable[[], float]


@dataclass(frozen=True, slots=True)
class ComponentRef:
    """Opaque handle to a renderable unit.

    The cache stores and returns it verbatim. ``target`` is whatever the
    render layer uses (a class, a template name, a callable) and is never
    invoked or inspected here.
    """

    target: Any
    name: str = ""

    def __repr__(self) -> str:
        return f"ComponentRef({self.name or type(self.target).__name__!r})"
