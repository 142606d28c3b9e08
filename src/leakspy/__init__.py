"""leakspy - detect subscriptions that outlive a test."""

__version__ = "0.1.0"

from leakspy.config import Config
from leakspy.detector import LeakDetector
from leakspy.errors import LeakSpyError, PatchConfigurationError, SubscriptionLeakError
from leakspy.report import assert_empty_or_report, emit_report, render_report
from leakspy.settings import DetectorSettings
from leakspy.snapshot import LeakEntry, Snapshot
from leakspy.spy import GlobalSpy, ScopedSpy, SpyHandle
from leakspy.zone import ROOT_ZONE, Zone, current_zone

__all__ = [
    # Detector
    "LeakDetector",
    "DetectorSettings",
    "Config",
    # Spies
    "GlobalSpy",
    "ScopedSpy",
    "SpyHandle",
    # Zones
    "ROOT_ZONE",
    "Zone",
    "current_zone",
    # Snapshots and reports
    "LeakEntry",
    "Snapshot",
    "assert_empty_or_report",
    "emit_report",
    "render_report",
    # Errors
    "LeakSpyError",
    "PatchConfigurationError",
    "SubscriptionLeakError",
]
