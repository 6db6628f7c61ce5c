"""
Gesture Classifier Module for the VR activity tracker.

Runs the four gesture detectors against the same snapshot. Detectors own
their state; the only cross-detector read is the jumping-jack detector
looking at the jump detector's airborne flag and landing time.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..core.data_types import ActivityConfig, DerivedMetrics, GestureEvent
from .jump import JumpDetector, JumpState
from .jumping_jack import JumpingJackDetector, JumpingJackState
from .side_lean import SideLeanDetector, SideLeanState
from .squat import SquatDetector, SquatState


@dataclass(frozen=True)
class GestureStates:
    """One state per gesture kind for the whole session."""
    squat: SquatState = field(default_factory=SquatState)
    jump: JumpState = field(default_factory=JumpState)
    jumping_jack: JumpingJackState = field(default_factory=JumpingJackState)
    side_lean: SideLeanState = field(default_factory=SideLeanState)

    def counts(self) -> Dict[str, int]:
        return {
            "squats": self.squat.count,
            "jumping_jacks_from_low": self.jumping_jack.count_from_low,
            "jumping_jacks_from_high": self.jumping_jack.count_from_high,
            "side_leans_left": self.side_lean.count_left,
            "side_leans_right": self.side_lean.count_right,
        }


class GestureClassifier:
    """Evaluates squat, jump, jumping jack and side lean detectors in order."""

    def __init__(self, config: ActivityConfig):
        self.squat = SquatDetector(config)
        self.jump = JumpDetector(config)
        self.jumping_jack = JumpingJackDetector(config)
        self.side_lean = SideLeanDetector(config)

    def step(
        self,
        states: GestureStates,
        metrics: DerivedMetrics,
        standing_height: float,
        delta_time: float,
        timestamp: float = 0.0
    ) -> Tuple[GestureStates, List[GestureEvent]]:
        """
        Advance every detector by one tick.

        The jump detector runs before the jumping-jack detector so that a
        landing on this tick is already visible to it.
        """
        events: List[GestureEvent] = []

        jump, jump_events = self.jump.step(states.jump, metrics, timestamp)
        events.extend(jump_events)

        squat, squat_events = self.squat.step(states.squat, metrics, standing_height, delta_time, timestamp)
        events.extend(squat_events)

        side_lean, lean_events = self.side_lean.step(states.side_lean, metrics, timestamp)
        events.extend(lean_events)

        jumping_jack, jj_events = self.jumping_jack.step(
            states.jumping_jack, metrics, jump, delta_time, timestamp
        )
        events.extend(jj_events)

        return GestureStates(
            squat=squat,
            jump=jump,
            jumping_jack=jumping_jack,
            side_lean=side_lean,
        ), events
