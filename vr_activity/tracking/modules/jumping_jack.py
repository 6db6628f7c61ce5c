"""
Jumping Jack Detection Module for the VR activity tracker.

A jumping jack alternates between two postures:

    HANDS_LOW_READY:  hands below the waist, feet on the ground
    HANDS_HIGH_READY: hands above the head, player airborne

Each transition is counted separately:
    - LOW -> HIGH counts one repetition "from low"
    - HIGH -> LOW counts one repetition "from high", but only when the
      hands come down shortly after the landing of the jump

Hands must stay at a similar height; otherwise the motion is not a
jumping jack and the FSM holds its phase.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Tuple

from ..core.data_types import ActivityConfig, DerivedMetrics, GestureEvent, GestureKind
from .jump import JumpState

logger = logging.getLogger(__name__)


class JumpingJackPhase(Enum):
    """Jumping jack detector phases."""
    NEUTRAL = "neutral"
    HANDS_LOW_READY = "hands_low_ready"
    HANDS_HIGH_READY = "hands_high_ready"


@dataclass(frozen=True)
class JumpingJackState:
    """
    Jumping jack detector state.

    Attributes:
        phase: Current FSM phase.
        count_from_low: Repetitions completed by raising the hands.
        count_from_high: Repetitions completed by lowering the hands.
        highlight_remaining: Seconds left of the "jumping jack done" indicator.
    """
    phase: JumpingJackPhase = JumpingJackPhase.NEUTRAL
    count_from_low: int = 0
    count_from_high: int = 0
    highlight_remaining: float = 0.0

    @property
    def total(self) -> int:
        return self.count_from_low + self.count_from_high


class JumpingJackDetector:
    """Counts jumping jacks using hand height and the jump detector's timing."""

    def __init__(self, config: ActivityConfig):
        self._config = config

    def _highlight(self, state: JumpingJackState) -> float:
        # An active highlight is not restarted
        if state.highlight_remaining > 0:
            return state.highlight_remaining
        return self._config.jumping_jack_highlight_seconds

    def step(
        self,
        state: JumpingJackState,
        metrics: DerivedMetrics,
        jump: JumpState,
        delta_time: float,
        timestamp: float = 0.0
    ) -> Tuple[JumpingJackState, List[GestureEvent]]:
        """
        Advance the jumping jack FSM by one tick.

        Args:
            state: Current jumping jack state
            metrics: Derived metrics of this tick
            jump: Jump detector state after this tick's update (read only)
            delta_time: Seconds since the previous tick
            timestamp: Session clock

        Returns:
            Tuple of (new_state, events)
        """
        cfg = self._config
        events: List[GestureEvent] = []

        if state.highlight_remaining > 0:
            state = replace(state, highlight_remaining=max(0.0, state.highlight_remaining - delta_time))

        if metrics.hands_height_difference >= cfg.hands_symmetry_tolerance:
            return state, events

        hands = metrics.average_hand_height

        if not jump.is_airborne and hands < cfg.jj_low_height_cap:
            if (state.phase == JumpingJackPhase.HANDS_HIGH_READY
                    and jump.time_since_landing(timestamp) < cfg.jj_timing_window_seconds):
                state = replace(
                    state,
                    count_from_high=state.count_from_high + 1,
                    highlight_remaining=self._highlight(state),
                )
                logger.info(f"Jumping jack detected from high ({state.count_from_high})")
                events.append(GestureEvent(
                    GestureKind.JUMPING_JACK, "from_high", timestamp,
                    count=state.count_from_high, scored=True
                ))
            state = replace(state, phase=JumpingJackPhase.HANDS_LOW_READY)

        elif jump.is_airborne and hands > cfg.jj_high_height_floor:
            if state.phase == JumpingJackPhase.HANDS_LOW_READY:
                state = replace(
                    state,
                    count_from_low=state.count_from_low + 1,
                    highlight_remaining=self._highlight(state),
                )
                logger.info(f"Jumping jack detected from low ({state.count_from_low})")
                events.append(GestureEvent(
                    GestureKind.JUMPING_JACK, "from_low", timestamp,
                    count=state.count_from_low, scored=True
                ))
            state = replace(state, phase=JumpingJackPhase.HANDS_HIGH_READY)

        return state, events
