"""Tests for call-site stack capture."""

from __future__ import annotations

import inspect

from leakspy import DetectorSettings, LeakDetector, stacks
from leakspy.stacks import capture_stack
from leakspy.stream import never


def subscribe_here(limit: int) -> str | None:
    return capture_stack(limit)


def test_stack_ends_at_the_caller():
    stack = subscribe_here(5)

    assert stack is not None
    frames = [line for line in stack.splitlines() if line.lstrip().startswith("File ")]
    assert frames[-1].endswith("in subscribe_here")


def test_stack_respects_the_limit():
    stack = subscribe_here(1)

    assert stack is not None
    assert stack.count('File "') == 1


def test_non_positive_limit_captures_nothing():
    assert subscribe_here(0) is None


def test_no_frame_outside_the_package_captures_nothing(monkeypatch):
    monkeypatch.setattr(stacks, "_is_internal", lambda frame: True)

    assert subscribe_here(5) is None


def test_missing_frame_support_captures_nothing(monkeypatch):
    monkeypatch.setattr(inspect, "currentframe", lambda: None)

    assert subscribe_here(5) is None


def test_uncapturable_stack_is_counted_as_untracked(monkeypatch):
    monkeypatch.setattr(stacks, "_is_internal", lambda frame: True)
    detector = LeakDetector(settings=DetectorSettings(stack_limit=10))

    with detector.spy():
        never().subscribe()

    entry = detector.snapshot().entries[0]
    assert entry.stacks == ()
    assert entry.untracked == 1
    assert entry.sequence == (1,)
