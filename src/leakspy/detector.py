"""Subscription leak detector."""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, Any

from leakspy.interception import InterceptionController
from leakspy.registry import SubscriptionRegistry
from leakspy.report import assert_empty_or_report
from leakspy.settings import DetectorSettings
from leakspy.spy import GlobalSpy, ScopedSpy, SpyHandle
from leakspy.stacks import capture_stack
from leakspy.stream import Observable
from leakspy.zone import current_zone

if TYPE_CHECKING:
    from rich.console import Console

    from leakspy.snapshot import Snapshot

logger = logging.getLogger(__name__)


class LeakDetector:
    """Tracks subscriptions created while at least one spy is enabled.

    The detector wraps ``target.subscribe`` while it has active spies and
    restores it when the last one is disabled. Subscriptions produced by
    spied calls stay in the registry until their teardown fires.

    Example:
        detector = LeakDetector()
        with detector.spy():
            run_code_under_test()
        detector.assert_empty_or_report()
    """

    __slots__ = ("settings", "registry", "_clock", "_active", "_controller")

    def __init__(
        self,
        target: type = Observable,
        settings: DetectorSettings | None = None,
        attribute: str = "subscribe",
    ) -> None:
        self.settings = settings or DetectorSettings()
        self.registry = SubscriptionRegistry()
        self._clock = itertools.count(1)
        # Dict as an insertion-ordered set.
        self._active: dict[SpyHandle, None] = {}
        self._controller = InterceptionController(target, self._track, attribute)

    @property
    def target(self) -> type:
        return self._controller.target

    @property
    def active_spies(self) -> int:
        return len(self._active)

    @property
    def is_patched(self) -> bool:
        return self._controller.is_patched

    def spy(self) -> GlobalSpy:
        """Enable tracking of every subscribe call until the spy is disabled."""
        handle = GlobalSpy(self._deactivate)
        self._activate(handle)
        return handle

    def scoped_spy(self, name: str = "leakspy") -> ScopedSpy:
        """Enable tracking of subscribe calls made inside the returned spy's zone.

        The zone is forked from the zone current at the time of the call.
        """
        handle = ScopedSpy(self._deactivate, current_zone().fork(name))
        self._activate(handle)
        return handle

    def dispose(self) -> None:
        """Disable every spy that is still active."""
        for handle in list(self._active):
            handle.disable()

    def snapshot(self) -> Snapshot:
        return self.registry.snapshot()

    def assert_empty_or_report(self, console: Console | None = None) -> None:
        """Report and raise if any tracked subscription is still open.

        Raises:
            SubscriptionLeakError: If the registry is not empty
        """
        assert_empty_or_report(self.snapshot(), console)

    def _activate(self, handle: SpyHandle) -> None:
        self._controller.ensure_patched()
        self._active[handle] = None
        logger.debug("Enabled %s (%d active)", type(handle).__name__, len(self._active))

    def _deactivate(self, handle: SpyHandle) -> None:
        self._active.pop(handle, None)
        logger.debug("Disabled %s (%d active)", type(handle).__name__, len(self._active))
        if not self._active:
            self._controller.try_unpatch()

    def _track(self, subscription: Any) -> Any:
        """Record a subscription produced by a spied subscribe call."""
        if not self._active or not any(h.is_enabled() for h in list(self._active)):
            return subscription

        sequence = next(self._clock)
        stack = capture_stack(self.settings.stack_limit) if self.settings.capture_stacks else None

        record = self.registry.get(subscription)
        if record is None:
            record = self.registry.create(subscription)
            subscription.add(lambda: self.registry.discard(subscription))
        record.note(sequence, stack)
        return subscription
