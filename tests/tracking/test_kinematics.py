import numpy as np
import pytest

from vr_activity.tracking.core.data_types import Point3D, PoseSample, TrackedPointId
from vr_activity.tracking.core.kinematics import (
    compute_derived_metrics, euclidean_distance, looking_down_amount, safe_unit, wrap_angle,
)


def test_euclidean_distance():
    assert euclidean_distance(Point3D(0, 0, 0), Point3D(3, 4, 0)) == pytest.approx(5.0)


def test_safe_unit_handles_zero_vector():
    zero = np.zeros(3)
    assert np.array_equal(safe_unit(zero), zero)
    assert np.allclose(safe_unit(np.array([0.0, 2.0, 0.0])), [0.0, 1.0, 0.0])


@pytest.mark.parametrize("forward, expected", [
    (Point3D(0, 0, 1), 0.0),
    (Point3D(0, -1, 0), 1.0),
    (Point3D(0, -5, 0), 1.0),
    (Point3D(0, 1, 0), -1.0),
    (Point3D(0, 0, 0), 0.0),
])
def test_looking_down_amount(forward, expected):
    assert looking_down_amount(forward) == pytest.approx(expected)


@pytest.mark.parametrize("angle, expected", [(0, 0), (370, 10), (-20, 340), (360, 0), (-1e-17, 0)])
def test_wrap_angle(angle, expected):
    assert wrap_angle(angle) == pytest.approx(expected)


def test_pose_sample_wraps_heading():
    sample = PoseSample("head", Point3D(0, 1.7, 0), heading_angle=-45)
    assert sample.point == TrackedPointId.HEAD
    assert sample.heading_angle == pytest.approx(315)


def test_compute_derived_metrics(make_frame):
    frame = make_frame(head_y=1.5, left_y=1.2, right_y=0.8, head_roll=400, forward=(0, -1, 1))
    metrics = compute_derived_metrics(frame, standing_height=1.7)

    assert metrics.head_height == pytest.approx(1.5)
    assert metrics.height_delta == pytest.approx(-0.2)
    assert metrics.hands_height_difference == pytest.approx(0.4)
    assert metrics.hand_height_delta == pytest.approx(0.4)
    assert metrics.average_hand_height == pytest.approx(1.0)
    assert metrics.looking_down == pytest.approx(np.sqrt(0.5))
    assert metrics.head_roll == pytest.approx(40)


def test_frame_requires_every_point(make_frame):
    from vr_activity.tracking.core.data_types import PoseFrame

    frame = make_frame()
    with pytest.raises(ValueError, match="right_hand"):
        PoseFrame.from_samples(0.1, [frame.head, frame.left_hand])
    with pytest.raises(ValueError, match="delta_time"):
        make_frame(delta_time=-0.1)


def test_wrapped_heading_stays_below_360():
    sample = PoseSample("head", Point3D(0, 1.7, 0), heading_angle=-1e-17)
    assert 0.0 <= sample.heading_angle < 360.0
    assert 0.0 <= wrap_angle(-1e-17) < 360.0
