import os
from dataclasses import fields
from typing import List

from dotenv import load_dotenv
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vr_activity.tracking.core.data_types import ActivityConfig

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../'))
load_dotenv(os.path.join(BASE_DIR, '.env'))

# Values that have to be strictly positive, everything else only non-negative
STRICTLY_POSITIVE_FIELDS = (
    'teleport_threshold',
    'movement_to_distance_scale',
    'default_standing_height',
    'squat_depth_fraction',
    'hands_symmetry_tolerance',
    'jj_timing_window_seconds',
    'lean_hand_raise_threshold',
    'lean_reset_hands_tolerance',
    'points_for_full_activity_bar',
)


def validate_activity_config(config: ActivityConfig) -> ActivityConfig:
    """
    Reject thresholds the tracker cannot work with.

    Raises:
        ValueError: listing every problem found
    """
    errors = []

    for f in fields(config):
        value = getattr(config, f.name)
        if value < 0:
            errors.append(f"{f.name} must not be negative (got {value})")
    for name in STRICTLY_POSITIVE_FIELDS:
        if getattr(config, name) <= 0:
            errors.append(f"{name} must be greater than 0")

    if config.movement_threshold >= config.teleport_threshold:
        errors.append("movement_threshold must be below teleport_threshold")
    if config.squat_depth_fraction >= 1:
        errors.append("squat_depth_fraction must be below 1")
    if config.jj_low_height_cap >= config.jj_high_height_floor:
        errors.append("jj_low_height_cap must be below jj_high_height_floor")

    if not config.lean_left_roll_low < config.lean_left_roll_high <= 360:
        errors.append("left lean roll band must satisfy low < high <= 360")
    if not config.lean_right_roll_low < config.lean_right_roll_high <= 360:
        errors.append("right lean roll band must satisfy low < high <= 360")
    if config.lean_left_roll_high > config.lean_right_roll_low:
        errors.append("left and right lean roll bands overlap")
    margin = config.lean_neutral_roll_margin
    if margin > config.lean_left_roll_low or 360 - margin < config.lean_right_roll_high:
        errors.append("lean_neutral_roll_margin overlaps a lean roll band")

    if errors:
        raise ValueError("; ".join(errors))
    return config


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra='ignore')

    PROJECT_NAME: str = os.getenv('PROJECT_NAME', 'VR ACTIVITY MONITOR')
    API_PREFIX: str = '/api'
    BACKEND_CORS_ORIGINS: List[str] = ['*']
    LOGGING_CONFIG_FILE: str = os.path.join(BASE_DIR, 'logging.ini')

    # Session settings
    ACTIVITY_LOG_DIR: str = os.getenv('ACTIVITY_LOG_DIR', os.path.join(BASE_DIR, 'data', 'logs'))
    ACTIVITY_SESSION_TIMEOUT: int = int(os.getenv('ACTIVITY_SESSION_TIMEOUT', '3600'))  # 1 hour default
    ACTIVITY_SAVE_SESSION_LOGS: bool = os.getenv('ACTIVITY_SAVE_SESSION_LOGS', 'false').lower() == 'true'

    # Distance tracking
    MOVEMENT_THRESHOLD: float = 0.1
    TELEPORT_THRESHOLD: float = 1.0
    MOVEMENT_TO_DISTANCE_SCALE: float = 100.0
    DEFAULT_STANDING_HEIGHT: float = 1.7

    # Squat
    SQUAT_DEPTH_FRACTION: float = 0.3
    SQUAT_PITCH_THRESHOLD: float = 0.5
    SQUAT_COOLDOWN_SECONDS: float = 5.0
    SQUAT_RESET_BAND: float = 0.1

    # Jump / jumping jack
    JUMP_HEIGHT_THRESHOLD: float = 0.1
    HANDS_SYMMETRY_TOLERANCE: float = 0.2
    JJ_LOW_HEIGHT_CAP: float = 1.0
    JJ_HIGH_HEIGHT_FLOOR: float = 1.5
    JJ_TIMING_WINDOW_SECONDS: float = 0.5
    JUMPING_JACK_HIGHLIGHT_SECONDS: float = 1.0

    # Side lean
    LEAN_LEFT_ROLL_LOW: float = 20.0
    LEAN_LEFT_ROLL_HIGH: float = 90.0
    LEAN_RIGHT_ROLL_LOW: float = 300.0
    LEAN_RIGHT_ROLL_HIGH: float = 340.0
    LEAN_NEUTRAL_ROLL_MARGIN: float = 10.0
    LEAN_HAND_RAISE_THRESHOLD: float = 0.6
    LEAN_RESET_HANDS_TOLERANCE: float = 0.2

    # Scoring
    POINTS_PER_SQUAT: int = 1000
    POINTS_PER_JUMPING_JACK: int = 250
    POINTS_PER_SIDE_LEAN: int = 250
    DISTANCE_POINTS_PER_UNIT: float = 1.0
    POINTS_FOR_FULL_ACTIVITY_BAR: int = 10000
    PROGRESS_SMOOTHING_RATE: float = 5.0

    ACTIVATION_DELAY_SECONDS: float = 1.0

    def activity_config(self) -> ActivityConfig:
        """Build the tracker configuration from these settings."""
        return ActivityConfig(**{
            f.name: getattr(self, f.name.upper()) for f in fields(ActivityConfig)
        })

    @model_validator(mode='after')
    def check_activity_config(self) -> 'Settings':
        validate_activity_config(self.activity_config())
        return self


settings = Settings()
