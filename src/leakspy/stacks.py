"""Call-site stack capture for tracked subscriptions."""

from __future__ import annotations

import inspect
import os
import traceback
from types import FrameType

_PACKAGE_DIR = os.path.dirname(__file__) + os.sep


def _is_internal(frame: FrameType) -> bool:
    return frame.f_code.co_filename.startswith(_PACKAGE_DIR)


def capture_stack(limit: int) -> str | None:
    """Format the caller's stack, skipping leakspy's own frames.

    Args:
        limit: Maximum number of frames to keep, nearest first

    Returns:
        The formatted stack, oldest frame first, or None when nothing
        could be captured
    """
    if limit <= 0:
        return None

    current = inspect.currentframe()
    frame: FrameType | None = current.f_back if current is not None else None
    while frame is not None and _is_internal(frame):
        frame = frame.f_back
    if frame is None:
        return None

    summary = traceback.StackSummary.extract(traceback.walk_stack(frame), limit=limit)
    if not summary:
        return None
    summary.reverse()
    return "".join(summary.format())
