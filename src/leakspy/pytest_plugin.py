"""pytest integration.

Enable in a ``conftest.py`` with::

    pytest_plugins = ["leakspy.pytest_plugin"]

Override the ``leakspy_target`` fixture (or pass ``--leakspy-target``) to
track a stream type other than ``leakspy.stream.Observable``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from leakspy.config import Config
from leakspy.detector import LeakDetector
from leakspy.stream import Observable

if TYPE_CHECKING:
    from collections.abc import Iterator


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("leakspy")
    group.addoption(
        "--leakspy-snapshot-dir",
        default=None,
        help="Directory to write leak snapshots to when a test leaks subscriptions",
    )
    group.addoption(
        "--leakspy-target",
        default=None,
        help="Stream type to track, as 'package.module:Class'",
    )


@pytest.fixture
def leakspy_config(request: pytest.FixtureRequest) -> Config:
    """Resolved config, with command line options applied."""
    config = Config.load()
    snapshot_dir = request.config.getoption("--leakspy-snapshot-dir")
    if snapshot_dir:
        config.snapshot_dir = Path(snapshot_dir)
    target = request.config.getoption("--leakspy-target")
    if target:
        config.target = target
    return config


@pytest.fixture
def leakspy_target(leakspy_config: Config) -> type:
    """Stream type whose subscribe calls are tracked."""
    return leakspy_config.resolve_target() or Observable


@pytest.fixture
def leak_detector(leakspy_config: Config, leakspy_target: type) -> Iterator[LeakDetector]:
    """A detector for ``leakspy_target``, disposed after the test."""
    detector = LeakDetector(target=leakspy_target, settings=leakspy_config.to_detector_settings())
    yield detector
    detector.dispose()


@pytest.fixture
def no_subscription_leaks(
    leak_detector: LeakDetector,
    leakspy_config: Config,
    request: pytest.FixtureRequest,
) -> Iterator[LeakDetector]:
    """Fail the test if it leaves any subscription open."""
    spy = leak_detector.spy()
    yield leak_detector
    spy.disable()

    snapshot = leak_detector.snapshot()
    if not snapshot.is_empty and leakspy_config.snapshot_dir is not None:
        name = re.sub(r"[^\w.-]+", "_", request.node.nodeid)
        snapshot.dump(leakspy_config.snapshot_dir / f"{name}.json")
    leak_detector.assert_empty_or_report()
