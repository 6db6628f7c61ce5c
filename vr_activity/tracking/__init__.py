# VR Activity Tracking Package
# Distance tracking, gesture recognition and scoring for three tracked points

from .core import ActivityMonitor, ActivityProcessor, ActivityConfig, PoseFrame, PoseSample
from .modules import ScoreBreakdown, GestureClassifier
from .utils import SessionLogger

__all__ = [
    'ActivityMonitor',
    'ActivityProcessor',
    'ActivityConfig',
    'PoseFrame',
    'PoseSample',
    'ScoreBreakdown',
    'GestureClassifier',
    'SessionLogger'
]
