"""Core detector settings."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class DetectorSettings:
    """Runtime settings required by the LeakDetector."""

    stack_limit: int = 50
    capture_stacks: bool = True
