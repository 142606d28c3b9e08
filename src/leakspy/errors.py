"""Error types raised by the leak detector."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from leakspy.snapshot import Snapshot


class LeakSpyError(Exception):
    """Base class for leakspy errors."""


class PatchConfigurationError(LeakSpyError):
    """Raised when the target type cannot be intercepted."""


class SubscriptionLeakError(LeakSpyError, AssertionError):
    """Raised when a snapshot still holds open subscriptions."""

    def __init__(self, count: int, snapshot: Snapshot | None = None) -> None:
        self.count = count
        self.snapshot = snapshot
        noun = "subscription" if count == 1 else "subscriptions"
        super().__init__(f"Subscription leak detected: {count} open {noun}")
