"""Leak report formatting and assertion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.text import Text

from leakspy.errors import SubscriptionLeakError

if TYPE_CHECKING:
    from leakspy.snapshot import Snapshot

REPORT_START = "=== SUBSCRIPTION LEAKS: {count} ==="
REPORT_END = "=== END SUBSCRIPTION LEAKS ==="


def render_report(snapshot: Snapshot) -> list[str]:
    """Render the report lines for a snapshot.

    The same snapshot always renders to the same lines.
    """
    lines = [REPORT_START.format(count=len(snapshot))]
    for index, entry in enumerate(snapshot.entries):
        sequence = ", ".join(str(n) for n in entry.sequence)
        lines.append(f"#{index} {entry.subscription} calls={entry.calls} sequence=[{sequence}]")
        if entry.untracked:
            lines.append(f"  untracked calls: {entry.untracked}")
        for number, stack in enumerate(entry.stacks, start=1):
            lines.append(f"  stack {number}:")
            lines.extend(f"    {line}" for line in stack.rstrip("\n").splitlines())
    lines.append(REPORT_END)
    return lines


def emit_report(snapshot: Snapshot, console: Console | None = None) -> None:
    """Write the report for ``snapshot`` to ``console`` (stderr by default)."""
    console = console or Console(stderr=True)
    for line in render_report(snapshot):
        console.print(Text(line), markup=False, highlight=False, soft_wrap=True)


def assert_empty_or_report(snapshot: Snapshot, console: Console | None = None) -> None:
    """Succeed silently on an empty snapshot, otherwise report and raise.

    Raises:
        SubscriptionLeakError: If the snapshot holds any open subscription
    """
    if snapshot.is_empty:
        return
    emit_report(snapshot, console)
    raise SubscriptionLeakError(len(snapshot), snapshot)
