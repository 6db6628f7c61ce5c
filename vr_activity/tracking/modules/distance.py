"""
Distance Module for the VR activity tracker.

Turns consecutive positions of each tracked point into travelled
distance, ignoring sensor jitter below the noise floor and reporting
non-physical jumps (headset reacquired, controller reconnected) as
teleports instead of scoring them.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from ..core.data_types import ActivityConfig, Point3D, TeleportEvent, TrackedPointId
from ..core.kinematics import euclidean_distance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PointTrackingState:
    """
    Distance tracking state of one tracked point.

    Attributes:
        previous_position: Position distances are measured from.
        cumulative_distance: Scaled distance travelled so far.
    """
    previous_position: Point3D
    cumulative_distance: float = 0.0


class TeleportGuard:
    """Classifies single-step displacements that are too large to be real motion."""

    def __init__(self, teleport_threshold: float):
        self._teleport_threshold = teleport_threshold

    def check(
        self,
        point: TrackedPointId,
        displacement: float,
        timestamp: float = 0.0
    ) -> Optional[TeleportEvent]:
        """
        Check one displacement.

        Args:
            point: Tracked point the displacement belongs to
            displacement: Distance moved since the previous position
            timestamp: Session clock

        Returns:
            TeleportEvent if the displacement is implausible, otherwise None
        """
        if displacement <= self._teleport_threshold:
            return None
        logger.warning(f"Teleport: {point.value} moved {displacement:.3f} in one tick")
        return TeleportEvent(point=point, displacement=displacement, timestamp=timestamp)


class DistanceAccumulator:
    """
    Accumulates travelled distance per tracked point.

    Example:
        >>> accumulator = DistanceAccumulator(ActivityConfig())
        >>> state = accumulator.seed(Point3D(0, 1, 0))
        >>> state, added, teleport = accumulator.update(state, TrackedPointId.HEAD, Point3D(0, 1.5, 0))
        >>> round(added, 1)
        50.0
    """

    def __init__(self, config: ActivityConfig, guard: Optional[TeleportGuard] = None):
        self._movement_threshold = config.movement_threshold
        self._scale = config.movement_to_distance_scale
        self._guard = guard or TeleportGuard(config.teleport_threshold)

    @property
    def guard(self) -> TeleportGuard:
        return self._guard

    def seed(self, position: Point3D, state: Optional[PointTrackingState] = None) -> PointTrackingState:
        """Set the reference position without accruing any distance."""
        if state is None:
            return PointTrackingState(previous_position=position)
        if not position.is_finite():
            return state
        return replace(state, previous_position=position)

    def update(
        self,
        state: PointTrackingState,
        point: TrackedPointId,
        new_position: Point3D,
        timestamp: float = 0.0
    ) -> Tuple[PointTrackingState, float, Optional[TeleportEvent]]:
        """
        Process a new position for one tracked point.

        Args:
            state: Current tracking state of the point
            point: Which point is being updated
            new_position: Position reported this tick
            timestamp: Session clock

        Returns:
            Tuple of (new_state, distance_added, teleport_event)
        """
        if not new_position.is_finite():
            logger.warning(f"Ignoring non-finite position for {point.value}")
            return state, 0.0, None
        if not state.previous_position.is_finite():
            return replace(state, previous_position=new_position), 0.0, None

        displacement = euclidean_distance(new_position, state.previous_position)

        teleport = self._guard.check(point, displacement, timestamp)
        if teleport is not None:
            # Measure the next tick from where the point reappeared
            return replace(state, previous_position=new_position), 0.0, teleport

        if displacement <= self._movement_threshold:
            return state, 0.0, None

        added = displacement * self._scale
        new_state = PointTrackingState(
            previous_position=new_position,
            cumulative_distance=state.cumulative_distance + added,
        )
        return new_state, added, None
