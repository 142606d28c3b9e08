"""Shared test fixtures."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from leakspy.stream import Observable

pytest_plugins = ["leakspy.pytest_plugin", "pytester"]

PRISTINE_SUBSCRIBE = Observable.__dict__["subscribe"]


@pytest.fixture
def temp_dir() -> Path:
    """Temporary directory for filesystem-based tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def pristine_observable_subscribe():
    """Every test must leave Observable.subscribe unwrapped."""
    assert Observable.__dict__["subscribe"] is PRISTINE_SUBSCRIBE
    yield
    assert Observable.__dict__["subscribe"] is PRISTINE_SUBSCRIBE
