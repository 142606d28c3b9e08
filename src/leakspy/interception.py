"""Installation and removal of the subscribe interception wrapper."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from leakspy.errors import PatchConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass(slots=True)
class InterceptionPatch:
    """An installed wrapper and what it replaced.

    ``owned`` holds the raw value found in the target's own namespace, or
    ``None`` when the original was inherited from a base class.
    """

    original: Callable[..., Any]
    replacement: Callable[..., Any]
    owned: Any = None


class InterceptionController:
    """Owns at most one wrapper on ``target.<attribute>`` at a time.

    Every call through the wrapper invokes the original implementation first
    and then hands the result to ``on_subscribe``, whose return value is
    passed back to the caller.
    """

    __slots__ = ("target", "attribute", "_on_subscribe", "_patch")

    def __init__(
        self,
        target: type,
        on_subscribe: Callable[[Any], Any],
        attribute: str = "subscribe",
    ) -> None:
        self.target = target
        self.attribute = attribute
        self._on_subscribe = on_subscribe
        self._patch: InterceptionPatch | None = None

    @property
    def is_patched(self) -> bool:
        return self._patch is not None

    def ensure_patched(self) -> None:
        """Install the wrapper unless it is already installed.

        Raises:
            PatchConfigurationError: If the target has no callable attribute
        """
        if self._patch is not None:
            return

        original = getattr(self.target, self.attribute, None)
        if original is None or not callable(original):
            raise PatchConfigurationError(
                f"{self.target.__name__}.{self.attribute} is not a callable subscribe implementation"
            )

        owned = vars(self.target).get(self.attribute)

        @functools.wraps(original)
        def replacement(*args: Any, **kwargs: Any) -> Any:
            subscription = original(*args, **kwargs)
            patch = self._patch
            # Stale wrappers left under another layer only pass through.
            if patch is None or patch.replacement is not replacement:
                return subscription
            return self._on_subscribe(subscription)

        patch = InterceptionPatch(original=original, replacement=replacement, owned=owned)
        replacement.__leakspy_controller__ = self  # type: ignore[attr-defined]
        replacement.__leakspy_patch__ = patch  # type: ignore[attr-defined]
        self._patch = patch
        setattr(self.target, self.attribute, replacement)
        logger.debug("Patched %s.%s", self.target.__name__, self.attribute)

    def try_unpatch(self) -> None:
        """Restore the original implementation if our wrapper is still on top."""
        patch = self._patch
        if patch is None:
            return
        self._patch = None

        current = vars(self.target).get(self.attribute, _MISSING)
        if current is not patch.replacement:
            logger.debug(
                "Skipped restoring %s.%s: another wrapper is installed on top",
                self.target.__name__,
                self.attribute,
            )
            return

        restored = _unwind(patch.owned)
        if restored is None:
            delattr(self.target, self.attribute)
        else:
            setattr(self.target, self.attribute, restored)
        logger.debug("Restored %s.%s", self.target.__name__, self.attribute)


def _unwind(value: Any) -> Any:
    """Skip wrappers whose controller has since been unpatched.

    Walks down through leakspy wrappers that are no longer their controller's
    current patch until a live wrapper or a foreign value is reached.
    """
    while True:
        patch = getattr(value, "__leakspy_patch__", None)
        if patch is None:
            return value
        controller = value.__leakspy_controller__
        if controller._patch is patch:
            return value
        value = patch.owned
