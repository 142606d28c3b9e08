"""Spy handles that switch subscription tracking on and off."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from leakspy.zone import current_zone, zone_contains

if TYPE_CHECKING:
    from collections.abc import Callable

    from leakspy.zone import Zone


R = TypeVar("R")


class SpyHandle:
    """Toggle that keeps tracking enabled until disabled.

    Handles are created enabled. ``disable()`` runs the teardown once; later
    calls do nothing. Used as a context manager, the handle is disabled when
    the block exits, including on error.
    """

    __slots__ = ("_enabled", "_teardown")

    def __init__(self, teardown: Callable[[SpyHandle], None]) -> None:
        self._enabled = True
        self._teardown = teardown

    @property
    def enabled(self) -> bool:
        return self._enabled

    def is_enabled(self) -> bool:
        """Check whether this spy should track the current subscribe call."""
        return self._enabled

    def disable(self) -> None:
        if not self._enabled:
            return
        self._enabled = False
        self._teardown(self)

    def __enter__(self) -> SpyHandle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.disable()


class GlobalSpy(SpyHandle):
    """Tracks every subscribe call in the process while enabled.

    It has no notion of which task is its own, so subscriptions made by
    unrelated tasks running concurrently are tracked as well.
    """

    __slots__ = ()

    def __enter__(self) -> GlobalSpy:
        return self


class ScopedSpy(SpyHandle):
    """Tracks only subscribe calls made inside its own zone subtree."""

    __slots__ = ("zone",)

    def __init__(self, teardown: Callable[[SpyHandle], None], zone: Zone) -> None:
        super().__init__(teardown)
        self.zone = zone

    def is_enabled(self) -> bool:
        return self._enabled and zone_contains(self.zone, current_zone())

    def run(self, callback: Callable[..., R], *args: Any, **kwargs: Any) -> R:
        """Call ``callback`` inside this spy's zone.

        Pass ``asyncio.create_task`` as the callback to keep a whole task
        inside the zone.
        """
        return self.zone.run(callback, *args, **kwargs)

    def __enter__(self) -> ScopedSpy:
        return self
