"""Live table of tracked, not yet released subscriptions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from leakspy.snapshot import LeakEntry, Snapshot


@dataclass(slots=True)
class SubscriptionRecord:
    """Diagnostics gathered for one subscription."""

    sequence: set[int] = field(default_factory=set)
    stacks: list[str] = field(default_factory=list)
    untracked: int = 0

    @property
    def calls(self) -> int:
        return len(self.stacks) + self.untracked

    def note(self, sequence: int, stack: str | None) -> None:
        """Record one tracked subscribe call."""
        self.sequence.add(sequence)
        if stack is None:
            self.untracked += 1
        else:
            self.stacks.append(stack)


class SubscriptionRegistry:
    """Maps open subscriptions to their records, in insertion order.

    Subscriptions are keyed by identity, so unhashable handles work too.
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[int, tuple[Any, SubscriptionRecord]] = {}

    def get(self, subscription: Any) -> SubscriptionRecord | None:
        entry = self._entries.get(id(subscription))
        return entry[1] if entry is not None else None

    def create(self, subscription: Any) -> SubscriptionRecord:
        record = SubscriptionRecord()
        self._entries[id(subscription)] = (subscription, record)
        return record

    def discard(self, subscription: Any) -> None:
        """Remove the record for ``subscription`` if it is the one tracked."""
        entry = self._entries.get(id(subscription))
        if entry is not None and entry[0] is subscription:
            del self._entries[id(subscription)]

    def snapshot(self) -> Snapshot:
        """Copy every record into an independent, immutable snapshot."""
        return Snapshot(
            entries=tuple(
                LeakEntry(
                    subscription=repr(subscription),
                    sequence=tuple(sorted(record.sequence)),
                    stacks=tuple(record.stacks),
                    untracked=record.untracked,
                )
                for subscription, record in self._entries.values()
            )
        )

    def __contains__(self, subscription: Any) -> bool:
        return self.get(subscription) is not None

    def __len__(self) -> int:
        return len(self._entries)
