"""Ambient execution zones.

A zone is a node in a parent-linked tree. The current zone is carried in a
context variable, so asyncio tasks created inside ``Zone.run`` keep the zone
for their whole lifetime, across suspension points.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

R = TypeVar("R")

MAX_ZONE_HOPS = 1000


class Zone:
    """A named execution scope with an optional parent."""

    __slots__ = ("name", "parent")

    def __init__(self, name: str, parent: Zone | None = None) -> None:
        self.name = name
        self.parent = parent

    def fork(self, name: str) -> Zone:
        """Create a child zone whose parent is this zone."""
        return Zone(name, parent=self)

    def run(self, callback: Callable[..., R], *args: Any, **kwargs: Any) -> R:
        """Call ``callback`` with this zone as the current zone."""
        token = _current_zone.set(self)
        try:
            return callback(*args, **kwargs)
        finally:
            _current_zone.reset(token)

    def __repr__(self) -> str:
        return f"Zone({self.name!r})"


ROOT_ZONE = Zone("<root>")

_current_zone: ContextVar[Zone] = ContextVar("leakspy_zone", default=ROOT_ZONE)


def current_zone() -> Zone:
    """Return the zone active in the calling context."""
    return _current_zone.get()


def zone_contains(zone: Zone, candidate: object, max_hops: int = MAX_ZONE_HOPS) -> bool:
    """Check whether ``candidate`` is ``zone`` or one of its descendants.

    Walks the parent chain starting at ``candidate``. A missing or malformed
    parent link, a cycle, or a chain longer than ``max_hops`` all count as
    "not contained".
    """
    visited: set[Zone] = set()
    node = candidate
    hops = 0
    while True:
        if node is zone:
            return True
        if not isinstance(node, Zone) or node in visited or hops >= max_hops:
            return False
        visited.add(node)
        node = node.parent
        hops += 1
