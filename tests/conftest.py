"""Shared fixtures for building pose frames and derived metrics."""

import pytest

from vr_activity.tracking.core.data_types import (
    ActivityConfig, DerivedMetrics, Point3D, PoseFrame, PoseSample, TrackedPointId,
)

STANDING_HEIGHT = 1.7
HAND_HEIGHT = 0.9


@pytest.fixture
def config():
    return ActivityConfig()


@pytest.fixture
def make_frame():
    """
    Build a PoseFrame from head and hand heights.

    Hands sit 0.3 to either side of the head so their horizontal position
    never changes between frames.
    """
    def _make(
        head_y=STANDING_HEIGHT,
        left_y=HAND_HEIGHT,
        right_y=HAND_HEIGHT,
        delta_time=0.1,
        head_roll=0.0,
        forward=(0.0, 0.0, 1.0),
        head_x=0.0,
        calibrate=False,
    ):
        samples = [
            PoseSample(TrackedPointId.HEAD, Point3D(head_x, head_y, 0.0), Point3D(*forward), head_roll),
            PoseSample(TrackedPointId.LEFT_HAND, Point3D(-0.3, left_y, 0.0)),
            PoseSample(TrackedPointId.RIGHT_HAND, Point3D(0.3, right_y, 0.0)),
        ]
        return PoseFrame.from_samples(delta_time, samples, calibrate=calibrate)

    return _make


@pytest.fixture
def make_metrics():
    """Build DerivedMetrics directly for detector level tests."""
    def _make(
        head_height=STANDING_HEIGHT,
        standing_height=STANDING_HEIGHT,
        left_y=HAND_HEIGHT,
        right_y=HAND_HEIGHT,
        looking_down=0.0,
        head_roll=0.0,
    ):
        return DerivedMetrics(
            head_height=head_height,
            height_delta=head_height - standing_height,
            hands_height_difference=abs(left_y - right_y),
            hand_height_delta=left_y - right_y,
            average_hand_height=(left_y + right_y) / 2,
            looking_down=looking_down,
            head_roll=head_roll % 360.0,
        )

    return _make
