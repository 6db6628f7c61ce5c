"""
Kinematics Module for the VR activity tracker.

Contains functions for distances, head orientation and the per-tick
derived metrics consumed by the gesture detectors.
"""

import numpy as np

from .data_types import DerivedMetrics, Point3D, PoseFrame, wrap_angle

DOWN = np.array([0.0, -1.0, 0.0])


def euclidean_distance(a: Point3D, b: Point3D) -> float:
    """
    Straight-line distance between two points.

    Args:
        a: First point
        b: Second point

    Returns:
        Distance in tracking-space units
    """
    return float(np.linalg.norm(a.to_array() - b.to_array()))


def safe_unit(v: np.ndarray) -> np.ndarray:
    """Normalize a vector, returning it unchanged when its length is zero."""
    n = np.linalg.norm(v)
    if n == 0:
        return v
    return v / n


def looking_down_amount(forward: Point3D) -> float:
    """
    How far the head is pitched towards the floor.

    Args:
        forward: Forward direction of the headset

    Returns:
        0 when looking straight ahead, 1 when looking straight down,
        negative when looking up
    """
    return float(np.dot(safe_unit(forward.to_array()), DOWN))


def compute_derived_metrics(frame: PoseFrame, standing_height: float) -> DerivedMetrics:
    """
    Compute the signals every gesture detector reads from one snapshot.

    Args:
        frame: Pose samples of the current tick
        standing_height: Calibrated (or default) standing head height

    Returns:
        DerivedMetrics for this tick
    """
    head = frame.head
    left_y = frame.left_hand.position.y
    right_y = frame.right_hand.position.y

    head_height = head.position.y
    hand_height_delta = left_y - right_y

    return DerivedMetrics(
        head_height=head_height,
        height_delta=head_height - standing_height,
        hands_height_difference=abs(hand_height_delta),
        hand_height_delta=hand_height_delta,
        average_hand_height=(left_y + right_y) / 2,
        looking_down=looking_down_amount(head.forward),
        head_roll=wrap_angle(head.heading_angle),
    )
