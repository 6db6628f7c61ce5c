"""
Core Module for the VR activity tracker.

Contains data types, derived metrics and the per-tick activity monitor.
"""

from .data_types import (
    TrackedPointId, TRACKED_POINTS, Point3D, PoseSample, PoseFrame, ActivityConfig,
    TeleportEvent, GestureKind, GestureEvent, DerivedMetrics
)
from .kinematics import (
    euclidean_distance, safe_unit, looking_down_amount, wrap_angle, compute_derived_metrics
)
from .monitor import (
    MonitorState, TickResult, ActivityProcessor, ActivityMonitor
)

__all__ = [
    # Data types
    'TrackedPointId', 'TRACKED_POINTS', 'Point3D', 'PoseSample', 'PoseFrame', 'ActivityConfig',
    'TeleportEvent', 'GestureKind', 'GestureEvent', 'DerivedMetrics',

    # Kinematics
    'euclidean_distance', 'safe_unit', 'looking_down_amount', 'wrap_angle', 'compute_derived_metrics',

    # Monitor
    'MonitorState', 'TickResult', 'ActivityProcessor', 'ActivityMonitor',
]
