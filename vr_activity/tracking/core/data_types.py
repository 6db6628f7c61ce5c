"""
Data Types Module for the VR activity tracker.

Data classes and type definitions shared by the tracking core: tracked
points, pose samples, per-tick frames and the tunable configuration.

Author: VR Activity Team
Version: 1.0.0
"""

from dataclasses import dataclass, asdict
from typing import Dict, Iterable, Optional, Tuple
from enum import Enum
import math
import numpy as np


class TrackedPointId(str, Enum):
    """The three monitored body locations."""
    LEFT_HAND = "left_hand"
    RIGHT_HAND = "right_hand"
    HEAD = "head"


TRACKED_POINTS: Tuple[TrackedPointId, ...] = (
    TrackedPointId.LEFT_HAND,
    TrackedPointId.RIGHT_HAND,
    TrackedPointId.HEAD,
)


def wrap_angle(angle_deg: float) -> float:
    """Wrap an angle in degrees into [0, 360)."""
    wrapped = float(angle_deg) % 360.0
    # tiny negative inputs round up to exactly 360
    return 0.0 if wrapped >= 360.0 else wrapped


@dataclass(frozen=True)
class Point3D:
    """
    A point (or direction) in tracking space.

    Attributes:
        x: Lateral coordinate.
        y: Vertical coordinate (height above the floor).
        z: Depth coordinate.
    """
    x: float
    y: float
    z: float

    def to_array(self) -> np.ndarray:
        """Convert to numpy array [x, y, z]."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)


FORWARD = Point3D(0.0, 0.0, 1.0)


@dataclass(frozen=True)
class PoseSample:
    """
    Pose of one tracked point captured for a single tick.

    Attributes:
        point: Which body location this sample belongs to.
        position: Position in tracking space.
        forward: Forward direction of the device.
        heading_angle: Roll angle in degrees, wrapped to [0, 360).
    """
    point: TrackedPointId
    position: Point3D
    forward: Point3D = FORWARD
    heading_angle: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "point", TrackedPointId(self.point))
        object.__setattr__(self, "heading_angle", wrap_angle(self.heading_angle))


@dataclass(frozen=True)
class PoseFrame:
    """
    Everything the tracker receives for one time step.

    Attributes:
        delta_time: Seconds elapsed since the previous tick.
        samples: One PoseSample per tracked point.
        calibrate: True when the calibration button was pressed this tick.
    """
    delta_time: float
    samples: Dict[TrackedPointId, PoseSample]
    calibrate: bool = False

    def __post_init__(self):
        if self.delta_time < 0:
            raise ValueError(f"delta_time must not be negative: {self.delta_time}")
        missing = [p.value for p in TRACKED_POINTS if p not in self.samples]
        if missing:
            raise ValueError(f"PoseFrame is missing samples for: {', '.join(missing)}")

    @classmethod
    def from_samples(
        cls,
        delta_time: float,
        samples: Iterable[PoseSample],
        calibrate: bool = False
    ) -> "PoseFrame":
        """Build a frame from a list of samples (later samples win)."""
        return cls(
            delta_time=delta_time,
            samples={s.point: s for s in samples},
            calibrate=calibrate,
        )

    @property
    def head(self) -> PoseSample:
        return self.samples[TrackedPointId.HEAD]

    @property
    def left_hand(self) -> PoseSample:
        return self.samples[TrackedPointId.LEFT_HAND]

    @property
    def right_hand(self) -> PoseSample:
        return self.samples[TrackedPointId.RIGHT_HAND]


@dataclass(frozen=True)
class ActivityConfig:
    """
    Tunable thresholds for distance tracking, gestures and scoring.

    Distances are in tracking-space units (metres for most headsets),
    angles in degrees and times in seconds.
    """
    # Distance tracking
    movement_threshold: float = 0.1
    teleport_threshold: float = 1.0
    movement_to_distance_scale: float = 100.0  # 100 = centimetres

    # Posture
    default_standing_height: float = 1.7

    # Squat
    squat_depth_fraction: float = 0.3
    squat_pitch_threshold: float = 0.5  # 0 = looking forward, 1 = looking down
    squat_cooldown_seconds: float = 5.0
    squat_reset_band: float = 0.1

    # Jump / jumping jack
    jump_height_threshold: float = 0.1
    hands_symmetry_tolerance: float = 0.2
    jj_low_height_cap: float = 1.0
    jj_high_height_floor: float = 1.5
    jj_timing_window_seconds: float = 0.5
    jumping_jack_highlight_seconds: float = 1.0

    # Side lean
    lean_left_roll_low: float = 20.0
    lean_left_roll_high: float = 90.0
    lean_right_roll_low: float = 300.0
    lean_right_roll_high: float = 340.0
    lean_neutral_roll_margin: float = 10.0
    lean_hand_raise_threshold: float = 0.6
    lean_reset_hands_tolerance: float = 0.2

    # Scoring
    points_per_squat: int = 1000
    points_per_jumping_jack: int = 250
    points_per_side_lean: int = 250
    distance_points_per_unit: float = 1.0
    points_for_full_activity_bar: int = 10000
    progress_smoothing_rate: float = 5.0

    # Session
    activation_delay_seconds: float = 1.0

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class TeleportEvent:
    """Diagnostic emitted when a tracked point jumps further than physically plausible."""
    point: TrackedPointId
    displacement: float
    timestamp: float

    def to_dict(self) -> Dict:
        return {
            "point": self.point.value,
            "displacement": round(self.displacement, 4),
            "timestamp": round(self.timestamp, 3),
        }


class GestureKind(str, Enum):
    """Gesture families recognised by the classifier."""
    SQUAT = "squat"
    JUMP = "jump"
    JUMPING_JACK = "jumping_jack"
    SIDE_LEAN = "side_lean"


@dataclass(frozen=True)
class GestureEvent:
    """
    A detector transition worth reporting.

    Attributes:
        kind: Gesture family.
        variant: Detector specific detail ("detected", "reset", "left",
            "from_low", "landing", ...).
        timestamp: Session clock when it happened.
        count: Counter value after the event, None for non-counting events.
        scored: True if the event incremented a scored counter.
    """
    kind: GestureKind
    variant: str
    timestamp: float
    count: Optional[int] = None
    scored: bool = False

    def to_dict(self) -> Dict:
        return {
            "kind": self.kind.value,
            "variant": self.variant,
            "timestamp": round(self.timestamp, 3),
            "count": self.count,
            "scored": self.scored,
        }


@dataclass(frozen=True)
class DerivedMetrics:
    """
    Per-tick signals derived from a PoseFrame and the posture baseline.

    Attributes:
        head_height: Current head height (0 when the headset lost tracking).
        height_delta: head_height minus the standing height baseline.
        hands_height_difference: Absolute height difference between hands.
        hand_height_delta: Signed left minus right hand height.
        average_hand_height: Mean height of both hands.
        looking_down: Dot product of head forward with straight down.
        head_roll: Head roll angle in [0, 360).
    """
    head_height: float
    height_delta: float
    hands_height_difference: float
    hand_height_delta: float
    average_hand_height: float
    looking_down: float
    head_roll: float
