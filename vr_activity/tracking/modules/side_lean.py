"""
Side Lean Detection Module for the VR activity tracker.

A side lean ("side jack") is a head tilt to one side with the opposite
hand raised. After each lean the player has to bring the head back to
neutral and the hands level before the next one counts.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple

from ..core.data_types import ActivityConfig, DerivedMetrics, GestureEvent, GestureKind

logger = logging.getLogger(__name__)


class LeanSide(Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class SideLeanState:
    """
    Side lean detector state.

    Attributes:
        armed: Ready to count the next lean.
        count_left: Leans to the left.
        count_right: Leans to the right.
        last_side: Side of the most recent lean.
    """
    armed: bool = False
    count_left: int = 0
    count_right: int = 0
    last_side: Optional[LeanSide] = None

    @property
    def total(self) -> int:
        return self.count_left + self.count_right


class SideLeanDetector:
    """Detects side leans from head roll and the signed hand height difference."""

    def __init__(self, config: ActivityConfig):
        self._config = config

    def is_neutral_roll(self, roll: float) -> bool:
        margin = self._config.lean_neutral_roll_margin
        return roll < margin or roll > 360.0 - margin

    def step(
        self,
        state: SideLeanState,
        metrics: DerivedMetrics,
        timestamp: float = 0.0
    ) -> Tuple[SideLeanState, List[GestureEvent]]:
        """
        Advance the side lean detector by one tick.

        Outcomes are checked in a fixed order (left, right, re-arm) and at
        most one of them fires per tick.
        """
        cfg = self._config
        roll = metrics.head_roll
        hands = metrics.hand_height_delta  # negative: right hand above left

        if (state.armed
                and cfg.lean_left_roll_low < roll < cfg.lean_left_roll_high
                and hands < -cfg.lean_hand_raise_threshold):
            state = replace(state, armed=False, count_left=state.count_left + 1, last_side=LeanSide.LEFT)
            logger.info(f"Side lean left detected ({state.count_left})")
            return state, [GestureEvent(GestureKind.SIDE_LEAN, "left", timestamp, count=state.count_left, scored=True)]

        if (state.armed
                and cfg.lean_right_roll_low < roll < cfg.lean_right_roll_high
                and hands > cfg.lean_hand_raise_threshold):
            state = replace(state, armed=False, count_right=state.count_right + 1, last_side=LeanSide.RIGHT)
            logger.info(f"Side lean right detected ({state.count_right})")
            return state, [GestureEvent(GestureKind.SIDE_LEAN, "right", timestamp, count=state.count_right, scored=True)]

        if (not state.armed
                and self.is_neutral_roll(roll)
                and abs(hands) < cfg.lean_reset_hands_tolerance):
            logger.debug("Side lean reset")
            return replace(state, armed=True), [GestureEvent(GestureKind.SIDE_LEAN, "reset", timestamp)]

        return state, []
