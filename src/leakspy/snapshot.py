"""Immutable point-in-time copies of the subscription registry."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class LeakEntry(BaseModel):
    """One subscription that was still open when the snapshot was taken."""

    model_config = ConfigDict(frozen=True)

    subscription: str = ""
    sequence: tuple[int, ...] = ()
    stacks: tuple[str, ...] = ()
    untracked: int = 0

    @property
    def calls(self) -> int:
        """Number of tracked subscribe calls that produced this subscription."""
        return len(self.stacks) + self.untracked


class Snapshot(BaseModel):
    """Open subscriptions in registry order."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[LeakEntry, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def dump(self, path: Path) -> None:
        """Write the snapshot as JSON."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> Snapshot:
        """Read a snapshot written by ``dump``."""
        return cls.model_validate_json(path.read_text(encoding="utf-8"))
