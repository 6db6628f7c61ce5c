"""
Modules Package for the VR activity tracker.

Contains the distance accumulator, calibration, gesture detectors and scoring.
"""

from .distance import DistanceAccumulator, TeleportGuard, PointTrackingState
from .calibrator import PostureReference, PostureBaseline, BaselineState
from .squat import SquatDetector, SquatState, SquatPhase
from .jump import JumpDetector, JumpState
from .jumping_jack import JumpingJackDetector, JumpingJackState, JumpingJackPhase
from .side_lean import SideLeanDetector, SideLeanState, LeanSide
from .classifier import GestureClassifier, GestureStates
from .scoring import ScoreAggregator, ScoreBreakdown, ProgressMeter, ProgressState

__all__ = [
    # Distance
    'DistanceAccumulator', 'TeleportGuard', 'PointTrackingState',

    # Calibration
    'PostureReference', 'PostureBaseline', 'BaselineState',

    # Gestures
    'SquatDetector', 'SquatState', 'SquatPhase',
    'JumpDetector', 'JumpState',
    'JumpingJackDetector', 'JumpingJackState', 'JumpingJackPhase',
    'SideLeanDetector', 'SideLeanState', 'LeanSide',
    'GestureClassifier', 'GestureStates',

    # Scoring
    'ScoreAggregator', 'ScoreBreakdown', 'ProgressMeter', 'ProgressState',
]
