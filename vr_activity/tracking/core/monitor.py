"""
Activity Monitor Module for the VR activity tracker.

Per-tick pipeline:

    PoseFrame ──► DistanceAccumulator / TeleportGuard (per point)
              ──► derived metrics
              ──► GestureClassifier (squat, jump, jumping jack, side lean)
              ──► ScoreAggregator / ProgressMeter

ActivityProcessor.advance() is a pure transition over MonitorState: it
returns a new state and never mutates the old one, so a recorded stream
of frames always replays to the same result. ActivityMonitor is the
stateful wrapper a driver loop calls once per frame.

Settle interval:
    For activation_delay_seconds after session start, samples only seed
    the reference positions. Trackers "teleport" into their starting pose
    when a session begins; none of that counts as distance or gestures.

Usage:
    monitor = ActivityMonitor.create_instance()

    while running:
        result = monitor.tick(PoseFrame.from_samples(delta_time, samples))
        ui.show(result.to_dict())

Author: VR Activity Team
Version: 1.0.0
"""

import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional

from .data_types import (
    TRACKED_POINTS, ActivityConfig, DerivedMetrics, GestureEvent, PoseFrame,
    PoseSample, TeleportEvent, TrackedPointId,
)
from .kinematics import compute_derived_metrics
from ..modules.calibrator import PostureBaseline, PostureReference
from ..modules.classifier import GestureClassifier, GestureStates
from ..modules.distance import DistanceAccumulator, PointTrackingState
from ..modules.scoring import ProgressMeter, ProgressState, ScoreAggregator, ScoreBreakdown
from ..modules.squat import SquatPhase

logger = logging.getLogger(__name__)

# Slack for comparing the summed delta_time clock against a delay
CLOCK_EPSILON = 1e-9


# ==================== STATE ====================

@dataclass(frozen=True)
class MonitorState:
    """
    Complete state of one tracking session.

    Attributes:
        clock: Session time in seconds (sum of delta_time).
        is_active: False during the settle interval.
        points: Distance tracking state per point.
        baseline: Standing height baseline.
        gestures: One state per gesture detector.
        progress: Activity bar fill.
    """
    clock: float = 0.0
    is_active: bool = False
    points: Dict[TrackedPointId, PointTrackingState] = field(default_factory=dict)
    baseline: PostureBaseline = field(default_factory=lambda: PostureBaseline(1.7))
    gestures: GestureStates = field(default_factory=GestureStates)
    progress: ProgressState = field(default_factory=ProgressState)

    def distances(self) -> Dict[TrackedPointId, float]:
        return {p: s.cumulative_distance for p, s in self.points.items()}


@dataclass(frozen=True)
class TickResult:
    """
    Output of one tick.

    Attributes:
        state: State after the tick.
        breakdown: Score recomputed from that state.
        metrics: Derived metrics of the tick.
        teleports: Teleport diagnostics raised this tick.
        gestures: Gesture events raised this tick.
        calibrated: None without a trigger, else whether calibration was accepted.
        activated: True on the tick that ended the settle interval.
    """
    state: MonitorState
    breakdown: ScoreBreakdown
    metrics: DerivedMetrics
    teleports: List[TeleportEvent] = field(default_factory=list)
    gestures: List[GestureEvent] = field(default_factory=list)
    calibrated: Optional[bool] = None
    activated: bool = False

    @property
    def is_jumping(self) -> bool:
        return self.state.gestures.jump.is_airborne

    def indicators(self) -> Dict[str, Any]:
        """Gesture feedback flags for the presentation layer."""
        gestures = self.state.gestures
        last_side = gestures.side_lean.last_side
        return {
            "squat_awaiting_reset": gestures.squat.phase == SquatPhase.AWAITING_RESET and gestures.squat.count > 0,
            "side_lean_active": not gestures.side_lean.armed and last_side is not None,
            "side_lean_side": last_side.value if last_side else None,
            "jumping_jack_active": gestures.jumping_jack.highlight_remaining > 0,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        state = self.state
        return {
            "is_active": state.is_active,
            "clock": round(state.clock, 3),
            "standing_height": round(state.baseline.standing_height, 4),
            "distances": {p.value: round(d, 2) for p, d in state.distances().items()},
            "score": self.breakdown.to_dict(),
            "counts": state.gestures.counts(),
            "is_jumping": self.is_jumping,
            "height_delta": round(self.metrics.height_delta, 4),
            "hands_height_difference": round(self.metrics.hands_height_difference, 4),
            "teleports": [t.to_dict() for t in self.teleports],
            "gestures": [g.to_dict() for g in self.gestures],
            "progress": state.progress.to_dict(),
            "indicators": self.indicators(),
            "calibrated": self.calibrated,
            "activated": self.activated,
        }


# ==================== PROCESSOR ====================

class ActivityProcessor:
    """
    Pure tick transition for one configuration.

    Collaborators are built once from the config; advance() only reads them.
    """

    def __init__(self, config: Optional[ActivityConfig] = None):
        self._config = config or ActivityConfig()
        self.accumulator = DistanceAccumulator(self._config)
        self.posture = PostureReference(self._config.default_standing_height)
        self.classifier = GestureClassifier(self._config)
        self.aggregator = ScoreAggregator(self._config)
        self.progress_meter = ProgressMeter(self._config)

    @property
    def config(self) -> ActivityConfig:
        return self._config

    def initial_state(self) -> MonitorState:
        return MonitorState(baseline=self.posture.default_baseline())

    def score(self, state: MonitorState) -> ScoreBreakdown:
        jumping_jacks = state.gestures.jumping_jack.total
        side_leans = state.gestures.side_lean.total
        return self.aggregator.compute(
            state.distances(),
            squats=state.gestures.squat.count,
            jumping_jacks=jumping_jacks,
            side_leans=side_leans,
        )

    def advance(self, state: MonitorState, frame: PoseFrame) -> TickResult:
        """
        Process one tick.

        Args:
            state: State before the tick
            frame: Pose samples, delta time and calibration trigger

        Returns:
            TickResult with the new state, score breakdown and events
        """
        clock = state.clock + frame.delta_time

        if not state.is_active:
            return self._settle(state, frame, clock)

        baseline = state.baseline
        calibrated: Optional[bool] = None
        if frame.calibrate:
            baseline, calibrated = self.posture.calibrate(baseline, frame.head.position.y, clock)

        points: Dict[TrackedPointId, PointTrackingState] = {}
        teleports: List[TeleportEvent] = []
        for point in TRACKED_POINTS:
            point_state, _, teleport = self.accumulator.update(
                state.points[point], point, frame.samples[point].position, clock
            )
            points[point] = point_state
            if teleport is not None:
                teleports.append(teleport)

        metrics = compute_derived_metrics(frame, baseline.standing_height)
        gestures, events = self.classifier.step(
            state.gestures, metrics, baseline.standing_height, frame.delta_time, clock
        )

        new_state = replace(
            state,
            clock=clock,
            points=points,
            baseline=baseline,
            gestures=gestures,
        )
        breakdown = self.score(new_state)
        new_state = replace(
            new_state,
            progress=self.progress_meter.step(state.progress, breakdown.total, frame.delta_time),
        )

        return TickResult(
            state=new_state,
            breakdown=breakdown,
            metrics=metrics,
            teleports=teleports,
            gestures=events,
            calibrated=calibrated,
        )

    def _settle(self, state: MonitorState, frame: PoseFrame, clock: float) -> TickResult:
        """Seed reference positions while the trackers settle."""
        points = {
            point: self.accumulator.seed(frame.samples[point].position, state.points.get(point))
            for point in TRACKED_POINTS
        }
        activated = clock + CLOCK_EPSILON >= self._config.activation_delay_seconds
        if frame.calibrate:
            logger.info("Calibration ignored: trackers still settling")
        if activated:
            logger.info(f"Activity tracking active after {clock:.2f}s")

        new_state = replace(state, clock=clock, is_active=activated, points=points)
        return TickResult(
            state=new_state,
            breakdown=self.score(new_state),
            metrics=compute_derived_metrics(frame, state.baseline.standing_height),
            activated=activated,
        )


# ==================== MONITOR (STATEFUL WRAPPER) ====================

class ActivityMonitor:
    """
    Stateful per-session monitor for a driver loop.

    Each instance owns its own MonitorState; instances share nothing.

    Example:
        >>> monitor = ActivityMonitor.create_instance()
        >>> result = monitor.tick(frame)
        >>> result.to_dict()["score"]["total"]
    """

    @classmethod
    def create_instance(
        cls,
        config: Optional[ActivityConfig] = None,
        instance_id: Optional[str] = None
    ) -> "ActivityMonitor":
        """
        Factory method: create a monitor with a unique ID.

        Args:
            config: Thresholds (None = defaults)
            instance_id: Custom ID (None = generated UUID)

        Returns:
            ActivityMonitor
        """
        monitor = cls(config)
        monitor.instance_id = instance_id or str(uuid.uuid4())
        return monitor

    def __init__(self, config: Optional[ActivityConfig] = None):
        self._processor = ActivityProcessor(config)
        self._state = self._processor.initial_state()
        self._calibration_pending = False
        self.instance_id = str(uuid.uuid4())

    @property
    def config(self) -> ActivityConfig:
        return self._processor.config

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def calibration_pending(self) -> bool:
        return self._calibration_pending

    def is_active(self) -> bool:
        return self._state.is_active

    def request_calibration(self) -> None:
        """Latch a calibration trigger; it is applied on the next active tick."""
        self._calibration_pending = True

    def tick(self, frame: PoseFrame) -> TickResult:
        """
        Process one frame and keep the resulting state.

        Args:
            frame: Pose samples of this tick

        Returns:
            TickResult
        """
        apply_pending = self._calibration_pending and self._state.is_active
        if apply_pending and not frame.calibrate:
            frame = replace(frame, calibrate=True)

        result = self._processor.advance(self._state, frame)

        if apply_pending:
            self._calibration_pending = False
        self._state = result.state
        return result

    def tick_samples(
        self,
        delta_time: float,
        samples: Iterable[PoseSample],
        calibrate: bool = False
    ) -> TickResult:
        return self.tick(PoseFrame.from_samples(delta_time, samples, calibrate))

    def score(self) -> ScoreBreakdown:
        return self._processor.score(self._state)

    def snapshot(self) -> Dict[str, Any]:
        """Summary of the current state without processing a frame."""
        state = self._state
        gestures = state.gestures
        return {
            "instance_id": self.instance_id,
            "is_active": state.is_active,
            "clock": round(state.clock, 3),
            "standing_height": round(state.baseline.standing_height, 4),
            "baseline": state.baseline.to_dict(),
            "distances": {p.value: round(d, 2) for p, d in state.distances().items()},
            "score": self.score().to_dict(),
            "counts": gestures.counts(),
            "is_jumping": gestures.jump.is_airborne,
            "squat_phase": gestures.squat.phase.value,
            "jumping_jack_phase": gestures.jumping_jack.phase.value,
            "side_lean_armed": gestures.side_lean.armed,
            "progress": state.progress.to_dict(),
            "calibration_pending": self._calibration_pending,
        }

    def reset(self) -> None:
        """Start over with a fresh session state."""
        self._state = self._processor.initial_state()
        self._calibration_pending = False
