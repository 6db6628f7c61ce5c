"""
Calibration Module for the VR activity tracker.

Handles the standing height baseline used by every height based gesture.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from enum import Enum

logger = logging.getLogger(__name__)


class BaselineState(Enum):
    """Where the current standing height came from."""
    DEFAULT = "default"
    CALIBRATED = "calibrated"


@dataclass(frozen=True)
class PostureBaseline:
    """
    Standing head height of the player.

    Attributes:
        standing_height: Head height when standing upright.
        state: DEFAULT until the first successful calibration.
        calibrated_at: Session clock of the last calibration.
    """
    standing_height: float
    state: BaselineState = BaselineState.DEFAULT
    calibrated_at: Optional[float] = None

    def to_dict(self) -> Dict:
        return {
            "standing_height": round(self.standing_height, 4),
            "state": self.state.value,
            "calibrated_at": self.calibrated_at,
        }


class PostureReference:
    """
    Owns calibration of the standing height.

    Calibration only ever happens on an explicit trigger (a controller
    button press); nothing in the tracker recalibrates on its own.
    """

    def __init__(self, default_standing_height: float = 1.7):
        self._default_standing_height = default_standing_height

    def default_baseline(self) -> PostureBaseline:
        return PostureBaseline(standing_height=self._default_standing_height)

    def calibrate(
        self,
        baseline: PostureBaseline,
        current_head_height: float,
        timestamp: float = 0.0
    ) -> Tuple[PostureBaseline, bool]:
        """
        Overwrite the standing height with the current head height.

        Args:
            baseline: Current baseline
            current_head_height: Head height at the moment of the trigger
            timestamp: Session clock

        Returns:
            Tuple of (baseline, accepted). A non-positive or non-finite reading
            means the headset lost tracking; it is rejected and the old
            baseline kept.
        """
        if not math.isfinite(current_head_height) or current_head_height <= 0:
            logger.warning(
                f"Calibration rejected: head height {current_head_height:.3f}, "
                f"keeping {baseline.standing_height:.3f}"
            )
            return baseline, False

        logger.info(f"Player's height calibrated to: {current_head_height:.3f}")
        return PostureBaseline(
            standing_height=current_head_height,
            state=BaselineState.CALIBRATED,
            calibrated_at=timestamp,
        ), True
