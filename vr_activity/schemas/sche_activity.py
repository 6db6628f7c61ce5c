"""
Activity Session Schemas - Data Transfer Objects.

Pose samples in, per-tick score and gesture feedback out.
"""

from dataclasses import replace
from typing import Optional, Dict, List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from vr_activity.helpers.enums import SessionStatus
from vr_activity.tracking.core.data_types import (
    TRACKED_POINTS, ActivityConfig, Point3D, PoseFrame, PoseSample, TrackedPointId,
)


# ==================== REQUEST SCHEMAS ====================

class Vector3(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    x: float
    y: float
    z: float

    def to_point(self) -> Point3D:
        return Point3D(self.x, self.y, self.z)


class PoseSampleSchema(BaseModel):
    """Pose of one tracked point."""
    model_config = ConfigDict(allow_inf_nan=False)

    point: TrackedPointId = Field(..., description="left_hand, right_hand or head")
    position: Vector3 = Field(..., description="Position in tracking space, y is up")
    forward: Vector3 = Field(default_factory=lambda: Vector3(x=0.0, y=0.0, z=1.0), description="Forward direction")
    heading_angle: float = Field(0.0, description="Roll angle in degrees")

    def to_sample(self) -> PoseSample:
        return PoseSample(
            point=self.point,
            position=self.position.to_point(),
            forward=self.forward.to_point(),
            heading_angle=self.heading_angle,
        )


class ActivityConfigOverrides(BaseModel):
    """Per-session threshold overrides; unset fields keep the server defaults."""
    movement_threshold: Optional[float] = Field(None, ge=0)
    teleport_threshold: Optional[float] = Field(None, gt=0)
    movement_to_distance_scale: Optional[float] = Field(None, gt=0)
    default_standing_height: Optional[float] = Field(None, gt=0)
    squat_depth_fraction: Optional[float] = Field(None, gt=0, lt=1)
    squat_pitch_threshold: Optional[float] = Field(None, ge=0)
    squat_cooldown_seconds: Optional[float] = Field(None, ge=0)
    squat_reset_band: Optional[float] = Field(None, ge=0)
    jump_height_threshold: Optional[float] = Field(None, ge=0)
    hands_symmetry_tolerance: Optional[float] = Field(None, gt=0)
    jj_low_height_cap: Optional[float] = Field(None, ge=0)
    jj_high_height_floor: Optional[float] = Field(None, ge=0)
    jj_timing_window_seconds: Optional[float] = Field(None, gt=0)
    jumping_jack_highlight_seconds: Optional[float] = Field(None, ge=0)
    lean_left_roll_low: Optional[float] = Field(None, ge=0, le=360)
    lean_left_roll_high: Optional[float] = Field(None, ge=0, le=360)
    lean_right_roll_low: Optional[float] = Field(None, ge=0, le=360)
    lean_right_roll_high: Optional[float] = Field(None, ge=0, le=360)
    lean_neutral_roll_margin: Optional[float] = Field(None, ge=0, le=180)
    lean_hand_raise_threshold: Optional[float] = Field(None, gt=0)
    lean_reset_hands_tolerance: Optional[float] = Field(None, gt=0)
    points_per_squat: Optional[int] = Field(None, ge=0)
    points_per_jumping_jack: Optional[int] = Field(None, ge=0)
    points_per_side_lean: Optional[int] = Field(None, ge=0)
    distance_points_per_unit: Optional[float] = Field(None, ge=0)
    points_for_full_activity_bar: Optional[int] = Field(None, gt=0)
    progress_smoothing_rate: Optional[float] = Field(None, ge=0)
    activation_delay_seconds: Optional[float] = Field(None, ge=0)

    def apply(self, base: ActivityConfig) -> ActivityConfig:
        return replace(base, **self.model_dump(exclude_none=True))


class StartSessionRequest(BaseModel):
    """Request to start a new activity session."""
    user_id: Optional[str] = Field(None, description="User identifier")
    config: Optional[ActivityConfigOverrides] = Field(None, description="Threshold overrides")


class TickRequest(BaseModel):
    """One time step: a sample for each tracked point."""
    model_config = ConfigDict(allow_inf_nan=False)

    delta_time: float = Field(..., ge=0, description="Seconds since the previous tick")
    samples: List[PoseSampleSchema] = Field(..., min_length=3, description="One sample per tracked point")
    calibrate: bool = Field(False, description="Calibration button pressed this tick")

    @model_validator(mode='after')
    def check_all_points_present(self) -> 'TickRequest':
        present = {s.point for s in self.samples}
        missing = [p.value for p in TRACKED_POINTS if p not in present]
        if missing:
            raise ValueError(f"missing samples for: {', '.join(missing)}")
        return self

    def to_frame(self) -> PoseFrame:
        return PoseFrame.from_samples(
            self.delta_time,
            [s.to_sample() for s in self.samples],
            calibrate=self.calibrate,
        )


# ==================== RESPONSE SCHEMAS ====================

class ScoreBreakdownSchema(BaseModel):
    distance_score: float = 0.0
    squat_score: float = 0.0
    jumping_jack_score: float = 0.0
    side_lean_score: float = 0.0
    total: float = 0.0


class GestureCountsSchema(BaseModel):
    squats: int = 0
    jumping_jacks_from_low: int = 0
    jumping_jacks_from_high: int = 0
    side_leans_left: int = 0
    side_leans_right: int = 0


class ProgressSchema(BaseModel):
    target: float = 0.0
    current: float = 0.0


class TeleportSchema(BaseModel):
    point: TrackedPointId
    displacement: float
    timestamp: float


class GestureEventSchema(BaseModel):
    kind: str
    variant: str
    timestamp: float
    count: Optional[int] = None
    scored: bool = False


class IndicatorsSchema(BaseModel):
    squat_awaiting_reset: bool = False
    side_lean_active: bool = False
    side_lean_side: Optional[str] = None
    jumping_jack_active: bool = False


class StartSessionResponse(BaseModel):
    """Response after starting a new session."""
    session_id: str = Field(..., description="Unique session identifier")
    status: SessionStatus = Field(..., description="Session status")
    websocket_url: str = Field(..., description="WebSocket URL for real-time streaming")
    activation_delay_seconds: float = Field(..., description="Settle time before scoring starts")
    message: str = Field(..., description="Status message")


class TickResponse(BaseModel):
    """Result of one tick (also sent over WebSocket)."""
    session_id: str
    is_active: bool
    activated: bool = False
    clock: float
    standing_height: float
    distances: Dict[str, float] = Field(default_factory=dict)
    score: ScoreBreakdownSchema
    counts: GestureCountsSchema
    is_jumping: bool = False
    height_delta: float = 0.0
    hands_height_difference: float = 0.0
    teleports: List[TeleportSchema] = Field(default_factory=list)
    gestures: List[GestureEventSchema] = Field(default_factory=list)
    progress: ProgressSchema
    indicators: IndicatorsSchema
    calibrated: Optional[bool] = None


class SessionSummaryResponse(BaseModel):
    """Current state of a session without processing a tick."""
    session_id: str
    status: SessionStatus
    user_id: Optional[str] = None
    tick_count: int = 0
    is_active: bool
    clock: float
    standing_height: float
    calibration_pending: bool = False
    distances: Dict[str, float] = Field(default_factory=dict)
    score: ScoreBreakdownSchema
    counts: GestureCountsSchema
    is_jumping: bool = False
    progress: ProgressSchema


class SessionResultsResponse(BaseModel):
    """Final results of an ended session."""
    session_id: str
    duration_seconds: int = 0
    session_clock: float = 0.0
    tick_count: int = 0
    teleport_count: int = 0
    total_score: float = 0.0
    score: ScoreBreakdownSchema
    counts: GestureCountsSchema
    distances: Dict[str, float] = Field(default_factory=dict)
    log_file: Optional[str] = None


class ActivityHealthResponse(BaseModel):
    """Response for activity service health check."""
    status: str = Field(..., description="Service status")
    active_sessions: int = Field(..., description="Active sessions count")
    version: str = Field(..., description="Service version")
