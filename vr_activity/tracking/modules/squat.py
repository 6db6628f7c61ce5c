"""
Squat Detection Module for the VR activity tracker.

FSM for one squat repetition:

    AWAITING_RESET ──(head back near standing height)──► ARMED_LOW
          ▲                                                  │
          └───────────────(deep enough, head not bowed)──────┘

A cooldown timer runs while AWAITING_RESET. Once it has elapsed a new
squat may count even without a reset; a reset always arms immediately,
so a clean squat cycle is never slowed down by the cooldown.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Tuple

from ..core.data_types import ActivityConfig, DerivedMetrics, GestureEvent, GestureKind

logger = logging.getLogger(__name__)


class SquatPhase(Enum):
    """Squat detector phases."""
    ARMED_LOW = "armed_low"            # a new squat may register
    AWAITING_RESET = "awaiting_reset"  # must return near standing height


@dataclass(frozen=True)
class SquatState:
    """
    Squat detector state.

    Attributes:
        phase: Current FSM phase.
        cooldown_elapsed: Seconds accrued since the last squat.
        count: Number of counted squats.
    """
    phase: SquatPhase = SquatPhase.AWAITING_RESET
    cooldown_elapsed: float = 0.0
    count: int = 0


class SquatDetector:
    """Detects squats from the head height relative to the standing baseline."""

    def __init__(self, config: ActivityConfig):
        self._config = config

    def is_deep_enough(self, metrics: DerivedMetrics, standing_height: float) -> bool:
        """
        Check the squat posture guards for one snapshot.

        A zero head height is what the headset reports when it loses
        tracking, so it never counts.
        """
        cfg = self._config
        return (
            metrics.head_height > 0
            and metrics.height_delta < 0
            and abs(metrics.height_delta) > standing_height * cfg.squat_depth_fraction
            and metrics.looking_down < cfg.squat_pitch_threshold
        )

    def step(
        self,
        state: SquatState,
        metrics: DerivedMetrics,
        standing_height: float,
        delta_time: float,
        timestamp: float = 0.0
    ) -> Tuple[SquatState, List[GestureEvent]]:
        """
        Advance the squat FSM by one tick.

        Args:
            state: Current squat state
            metrics: Derived metrics of this tick
            standing_height: Current baseline
            delta_time: Seconds since the previous tick
            timestamp: Session clock

        Returns:
            Tuple of (new_state, events)
        """
        cfg = self._config
        events: List[GestureEvent] = []

        if state.phase == SquatPhase.AWAITING_RESET and abs(metrics.height_delta) < cfg.squat_reset_band:
            logger.debug("Squat reset")
            state = replace(state, phase=SquatPhase.ARMED_LOW)
            events.append(GestureEvent(GestureKind.SQUAT, "reset", timestamp, count=state.count))

        if state.phase == SquatPhase.AWAITING_RESET and state.cooldown_elapsed < cfg.squat_cooldown_seconds:
            return replace(state, cooldown_elapsed=state.cooldown_elapsed + delta_time), events

        if self.is_deep_enough(metrics, standing_height):
            state = SquatState(
                phase=SquatPhase.AWAITING_RESET,
                cooldown_elapsed=0.0,
                count=state.count + 1,
            )
            logger.info(f"Squat detected ({state.count})")
            events.append(GestureEvent(GestureKind.SQUAT, "detected", timestamp, count=state.count, scored=True))

        return state, events
