"""
Scoring Module for the VR activity tracker.

Combines travelled distance and gesture counts into one activity score:

    total = Σ distance × distance_points_per_unit
          + squats × points_per_squat
          + (jumping jacks from low + from high) × points_per_jumping_jack
          + (side leans left + right) × points_per_side_lean

The score is recomputed from state on every tick and never accumulated
separately, so it cannot drift from the counters it is made of.

The progress meter follows the score towards a "full activity bar"
target with frame-rate independent smoothing.

Author: VR Activity Team
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import Dict, Mapping

from ..core.data_types import ActivityConfig


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Score of the current session.

    Attributes:
        distance_score: Points from travelled distance of all points.
        squat_score: Points from squats.
        jumping_jack_score: Points from both jumping jack counters.
        side_lean_score: Points from left and right side leans.
        total: Sum of all of the above.
    """
    distance_score: float = 0.0
    squat_score: float = 0.0
    jumping_jack_score: float = 0.0
    side_lean_score: float = 0.0
    total: float = 0.0

    def to_dict(self) -> dict:
        return {
            "distance_score": round(self.distance_score, 2),
            "squat_score": round(self.squat_score, 2),
            "jumping_jack_score": round(self.jumping_jack_score, 2),
            "side_lean_score": round(self.side_lean_score, 2),
            "total": round(self.total, 2),
        }


class ScoreAggregator:
    """
    Weighted sum of distances and gesture counts.

    Example:
        >>> aggregator = ScoreAggregator(ActivityConfig())
        >>> aggregator.compute({"head": 10.0}, squats=1, jumping_jacks=0, side_leans=2).total
        1510.0
    """

    def __init__(self, config: ActivityConfig):
        self._config = config

    def compute(
        self,
        distances: Mapping[object, float],
        squats: int,
        jumping_jacks: int,
        side_leans: int
    ) -> ScoreBreakdown:
        """
        Compute the score breakdown.

        Args:
            distances: Cumulative distance per tracked point
            squats: Squat count
            jumping_jacks: Jumping jacks counted from either direction
            side_leans: Side leans to either side

        Returns:
            ScoreBreakdown
        """
        cfg = self._config
        distance_score = sum(distances.values()) * cfg.distance_points_per_unit
        squat_score = float(squats * cfg.points_per_squat)
        jumping_jack_score = float(jumping_jacks * cfg.points_per_jumping_jack)
        side_lean_score = float(side_leans * cfg.points_per_side_lean)

        return ScoreBreakdown(
            distance_score=distance_score,
            squat_score=squat_score,
            jumping_jack_score=jumping_jack_score,
            side_lean_score=side_lean_score,
            total=distance_score + squat_score + jumping_jack_score + side_lean_score,
        )


@dataclass(frozen=True)
class ProgressState:
    """
    Fill level of the activity bar.

    Attributes:
        target: total / points_for_full_activity_bar.
        current: Smoothed value shown to the player.
    """
    target: float = 0.0
    current: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"target": round(self.target, 4), "current": round(self.current, 4)}


class ProgressMeter:
    """Moves the displayed fill towards the score target."""

    SNAP_DISTANCE = 0.001

    def __init__(self, config: ActivityConfig):
        self._points_for_full_bar = config.points_for_full_activity_bar
        self._rate = config.progress_smoothing_rate

    def step(self, state: ProgressState, total: float, delta_time: float) -> ProgressState:
        target = total / self._points_for_full_bar
        if abs(target - state.current) > self.SNAP_DISTANCE:
            t = min(1.0, max(0.0, delta_time * self._rate))
            current = state.current + (target - state.current) * t
        else:
            current = target
        return ProgressState(target=target, current=current)
