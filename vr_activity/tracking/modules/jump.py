"""
Jump Detection Module for the VR activity tracker.

Jumps are not scored on their own; the detector supplies the airborne
flag and landing time the jumping-jack detector needs.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.data_types import ActivityConfig, DerivedMetrics, GestureEvent, GestureKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JumpState:
    """
    Jump detector state.

    Attributes:
        is_airborne: Head is above the jump threshold.
        last_landing_time: Session clock of the last landing, None before any.
    """
    is_airborne: bool = False
    last_landing_time: Optional[float] = None

    def time_since_landing(self, now: float) -> float:
        if self.last_landing_time is None:
            return float("inf")
        return now - self.last_landing_time


class JumpDetector:
    """Tracks whether the player is in the air."""

    def __init__(self, config: ActivityConfig):
        self._jump_height_threshold = config.jump_height_threshold

    def step(
        self,
        state: JumpState,
        metrics: DerivedMetrics,
        timestamp: float = 0.0
    ) -> Tuple[JumpState, List[GestureEvent]]:
        airborne = metrics.height_delta > self._jump_height_threshold

        if airborne and not state.is_airborne:
            return JumpState(True, state.last_landing_time), [
                GestureEvent(GestureKind.JUMP, "takeoff", timestamp)
            ]

        if state.is_airborne and not airborne:
            logger.debug("No longer jumping")
            return JumpState(False, timestamp), [
                GestureEvent(GestureKind.JUMP, "landing", timestamp)
            ]

        return state, []
